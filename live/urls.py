# live/urls.py
from django.urls import path

from . import views

app_name = 'live'

urlpatterns = [
    # Schedules
    path('schedules/', views.schedule_list_view, name='schedule_list'),
    path('schedules/create/', views.schedule_create_view, name='schedule_create'),
    path('schedules/<int:schedule_id>/edit/', views.schedule_edit_view, name='schedule_edit'),
    path('schedules/<int:schedule_id>/toggle/', views.schedule_toggle_view, name='schedule_toggle'),
    path('schedules/<int:schedule_id>/delete/', views.schedule_delete_view, name='schedule_delete'),

    # Sessions
    path('sessions/', views.session_list_view, name='session_list'),
    path('sessions/create/', views.session_create_view, name='session_create'),
    path('sessions/<int:session_id>/', views.session_detail_view, name='session_detail'),
    path('sessions/<int:session_id>/edit/', views.session_edit_view, name='session_edit'),
    path('sessions/<int:session_id>/<str:action>/', views.session_action_view, name='session_action'),
]
