# users/adapters.py
"""
Account adapter for back office logins.
"""
import logging

from allauth.account.adapter import DefaultAccountAdapter
from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse

logger = logging.getLogger(__name__)


class BackOfficeAccountAdapter(DefaultAccountAdapter):
    """Closed signup; accounts are created by administrators."""

    def is_open_for_signup(self, request):
        return getattr(settings, 'ACCOUNT_ALLOW_REGISTRATION', False)

    def get_login_redirect_url(self, request):
        return reverse('home')

    def clean_email(self, email):
        return super().clean_email(email).lower()

    def respond_user_inactive(self, request, user):
        messages.error(
            request,
            "Your account is inactive. Please contact an administrator."
        )
        return redirect('account_login')

    def authentication_failed(self, request, **kwargs):
        logger.warning(f"Failed login attempt for email: {kwargs.get('email', 'Unknown')}")
        return super().authentication_failed(request, **kwargs)
