# students/urls.py
from django.urls import path

from . import views

app_name = 'students'

urlpatterns = [
    path('', views.student_list_view, name='student_list'),
    path('create/', views.student_create_view, name='student_create'),
    path('<int:student_id>/', views.student_detail_view, name='student_detail'),
    path('<int:student_id>/edit/', views.student_edit_view, name='student_edit'),
    path('<int:student_id>/delete/', views.student_delete_view, name='student_delete'),

    # CSV import / export
    path('import/', views.student_import_view, name='student_import'),
    path('import/preview/', views.student_import_preview_view, name='student_import_preview'),
    path('export/', views.student_export_view, name='student_export'),
    path('import/sample/', views.student_sample_csv_view, name='student_sample_csv'),
]
