# funnels/urls.py
from django.urls import path

from . import views

app_name = 'funnels'

urlpatterns = [
    path('', views.funnel_list_view, name='funnel_list'),
    path('<int:funnel_id>/', views.funnel_detail_view, name='funnel_detail'),
    path('<int:funnel_id>/duplicate/', views.funnel_duplicate_view, name='funnel_duplicate'),
    path('<int:funnel_id>/<str:action>/', views.funnel_action_view, name='funnel_action'),

    # API
    path('api/<int:funnel_id>/chart/', views.funnel_chart_api, name='funnel_chart_api'),
]
