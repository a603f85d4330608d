# enrollments/urls.py
from django.urls import path

from . import views

app_name = 'enrollments'

urlpatterns = [
    path('', views.enrollment_list_view, name='enrollment_list'),
    path('create/', views.enrollment_create_view, name='enrollment_create'),
    path('<int:enrollment_id>/', views.enrollment_detail_view, name='enrollment_detail'),
    path('<int:enrollment_id>/edit/', views.enrollment_edit_view, name='enrollment_edit'),
    path('<int:enrollment_id>/delete/', views.enrollment_delete_view, name='enrollment_delete'),

    # API
    path('api/students/search/', views.student_search_api, name='student_search_api'),
]
