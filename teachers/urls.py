# teachers/urls.py
from django.urls import path

from . import views

app_name = 'teachers'

urlpatterns = [
    path('', views.teacher_list_view, name='teacher_list'),
    path('create/', views.teacher_create_view, name='teacher_create'),
    path('<int:teacher_id>/', views.teacher_detail_view, name='teacher_detail'),
    path('<int:teacher_id>/edit/', views.teacher_edit_view, name='teacher_edit'),
    path('<int:teacher_id>/toggle-status/', views.teacher_toggle_status_view, name='teacher_toggle_status'),

    # Payslips
    path('payslips/', views.payslip_list_view, name='payslip_list'),
    path('payslips/generate/', views.payslip_generate_view, name='payslip_generate'),
    path('payslips/<int:payslip_id>/', views.payslip_detail_view, name='payslip_detail'),
    path('payslips/<int:payslip_id>/edit/', views.payslip_edit_view, name='payslip_edit'),
    path('payslips/<int:payslip_id>/finalize/', views.payslip_finalize_view, name='payslip_finalize'),
    path('payslips/<int:payslip_id>/mark-paid/', views.payslip_mark_paid_view, name='payslip_mark_paid'),
    path('payslips/<int:payslip_id>/revert/', views.payslip_revert_view, name='payslip_revert'),
    path('payslips/<int:payslip_id>/delete/', views.payslip_delete_view, name='payslip_delete'),
]
