# site_settings/urls.py
from django.urls import path

from . import views

urlpatterns = [
    path('', views.general_settings_view, name='general'),
    path('appearance/', views.appearance_settings_view, name='appearance'),
    path('appearance/remove-logo/', views.remove_logo_view, name='remove_logo'),
    path('appearance/remove-favicon/', views.remove_favicon_view, name='remove_favicon'),
    path('email/', views.email_settings_view, name='email'),
    path('email/test/', views.send_test_email_view, name='send_test_email'),
    path('shipping/', views.shipping_settings_view, name='shipping'),
    path('shipping/test/', views.test_shipping_connection_view, name='test_shipping_connection'),
    path('pricing/', views.pricing_settings_view, name='pricing'),
    path('bank/', views.bank_settings_view, name='bank'),
]
