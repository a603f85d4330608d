# site_settings/views.py
"""
Settings screens: general, appearance, email, shipping, pricing and bank transfer details.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from core.decorators import admin_required
from shared.exceptions.shipping import ShippingError
from shared.services.email import EmailService
from shared.services.shipping import JntShippingService

from .forms import (
    AppearanceSettingsForm,
    BankSettingsForm,
    EmailSettingsForm,
    GeneralSettingsForm,
    PricingSettingsForm,
    ShippingSettingsForm,
    TestEmailForm,
)
from .services import SettingsService

logger = logging.getLogger(__name__)


def _settings_screen(request, form_class, template, success_message, url_name, extra_context=None):
    """Shared GET/POST handling for a plain settings form."""
    if request.method == 'POST':
        form = form_class(request.POST)
        if form.is_valid():
            SettingsService.update_multiple(form.setting_values())
            logger.info(f"{form_class.GROUP} settings updated by user {request.user.pk}")
            messages.success(request, success_message)
            return redirect(url_name)
    else:
        form = form_class(initial=form_class.initial_from(SettingsService))

    context = {
        'form': form,
        'active_tab': form_class.GROUP,
    }
    context.update(extra_context or {})
    return render(request, template, context)


@login_required
@admin_required
def general_settings_view(request):
    return _settings_screen(
        request, GeneralSettingsForm, 'site_settings/general.html',
        "General settings saved successfully.", 'settings:general',
        {'page_title': 'General Settings'},
    )


@login_required
@admin_required
def appearance_settings_view(request):
    if request.method == 'POST':
        form = AppearanceSettingsForm(request.POST, request.FILES)
        if form.is_valid():
            SettingsService.update_multiple(form.setting_values())

            if form.cleaned_data.get('logo'):
                SettingsService.set_file(SettingsService.LOGO_KEY, form.cleaned_data['logo'],
                                         description='Site logo')
            if form.cleaned_data.get('favicon'):
                SettingsService.set_file(SettingsService.FAVICON_KEY, form.cleaned_data['favicon'],
                                         description='Site favicon')

            logger.info(f"Appearance settings updated by user {request.user.pk}")
            messages.success(request, "Appearance settings saved successfully.")
            return redirect('settings:appearance')
    else:
        form = AppearanceSettingsForm(initial=SettingsService.get_appearance_config())

    return render(request, 'site_settings/appearance.html', {
        'form': form,
        'logo_url': SettingsService.get_logo(),
        'favicon_url': SettingsService.get_favicon(),
        'active_tab': 'appearance',
        'page_title': 'Appearance Settings',
    })


@login_required
@admin_required
@require_POST
def remove_logo_view(request):
    SettingsService.remove_file(SettingsService.LOGO_KEY)
    messages.success(request, "Logo removed.")
    return redirect('settings:appearance')


@login_required
@admin_required
@require_POST
def remove_favicon_view(request):
    SettingsService.remove_file(SettingsService.FAVICON_KEY)
    messages.success(request, "Favicon removed.")
    return redirect('settings:appearance')


@login_required
@admin_required
def email_settings_view(request):
    return _settings_screen(
        request, EmailSettingsForm, 'site_settings/email.html',
        "Email settings saved successfully.", 'settings:email',
        {
            'test_form': TestEmailForm(initial={'test_email': request.user.email}),
            'has_password': bool(SettingsService.get('smtp_password')),
            'page_title': 'Email Settings',
        },
    )


@login_required
@admin_required
@require_POST
def send_test_email_view(request):
    form = TestEmailForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Enter a valid email address for the test email.")
        return redirect('settings:email')

    recipient = form.cleaned_data['test_email']
    try:
        EmailService.send_test_email(recipient)
        messages.success(request, f"Test email sent to {recipient}.")
    except Exception as e:
        logger.warning(f"Test email to {recipient} failed: {e}")
        messages.error(request, f"Failed to send test email: {e}")

    return redirect('settings:email')


@login_required
@admin_required
def shipping_settings_view(request):
    return _settings_screen(
        request, ShippingSettingsForm, 'site_settings/shipping.html',
        "Shipping settings saved successfully.", 'settings:shipping',
        {
            'is_configured': SettingsService.is_jnt_configured(),
            'is_enabled': SettingsService.is_jnt_enabled(),
            'page_title': 'Shipping Settings',
        },
    )


@login_required
@admin_required
@require_POST
def test_shipping_connection_view(request):
    """Save the submitted credentials, then ask J&T for a price quote."""
    form = ShippingSettingsForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please correct the shipping settings before testing the connection.")
        return redirect('settings:shipping')

    customer_code = form.cleaned_data.get('jnt_customer_code')
    private_key = form.cleaned_data.get('jnt_private_key') or SettingsService.get('jnt_private_key')
    if not customer_code or not private_key:
        messages.error(request, "Customer code and private key are required to test the connection.")
        return redirect('settings:shipping')

    SettingsService.update_multiple(form.setting_values())

    try:
        connected = JntShippingService().test_connection()
    except ShippingError as e:
        logger.warning(f"J&T connection test could not run: {e}")
        connected = False

    if connected:
        messages.success(request, "Successfully connected to J&T Express.")
    else:
        messages.error(request, "Could not connect to J&T Express. Please check your credentials.")

    return redirect('settings:shipping')


@login_required
@admin_required
def pricing_settings_view(request):
    return _settings_screen(
        request, PricingSettingsForm, 'site_settings/pricing.html',
        "Pricing tier settings saved successfully.", 'settings:pricing',
        {'page_title': 'Pricing Settings'},
    )


@login_required
@admin_required
def bank_settings_view(request):
    return _settings_screen(
        request, BankSettingsForm, 'site_settings/bank.html',
        "Bank transfer settings saved successfully.", 'settings:bank',
        {'page_title': 'Bank Transfer Settings'},
    )
