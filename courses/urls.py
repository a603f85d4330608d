# courses/urls.py
from django.urls import path

from . import views

app_name = 'courses'

urlpatterns = [
    path('', views.course_list_view, name='course_list'),
    path('create/', views.course_create_view, name='course_create'),
    path('<int:course_id>/', views.course_detail_view, name='course_detail'),
    path('<int:course_id>/edit/', views.course_edit_view, name='course_edit'),

    # Classes
    path('<int:course_id>/classes/create/', views.class_create_view, name='class_create'),
    path('classes/<int:class_id>/', views.class_detail_view, name='class_detail'),

    # Sessions
    path('sessions/verification/', views.session_verification_view, name='session_verification'),
    path('sessions/<int:session_id>/', views.session_detail_view, name='session_detail'),
    path('sessions/<int:session_id>/complete/', views.session_complete_view, name='session_complete'),
    path('sessions/<int:session_id>/cancel/', views.session_cancel_view, name='session_cancel'),
    path('sessions/<int:session_id>/verify/', views.session_verify_view, name='session_verify'),
    path('sessions/<int:session_id>/unverify/', views.session_unverify_view, name='session_unverify'),
]
