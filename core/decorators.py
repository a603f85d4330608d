# core/decorators.py
import logging
from functools import wraps

from django.contrib import messages
from django.shortcuts import redirect

logger = logging.getLogger(__name__)


def role_required(*roles):
    """Decorator to restrict a view to users holding one of the given roles."""
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped_view(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return redirect('account_login')

            if request.user.is_superuser or request.user.role in roles:
                return view_func(request, *args, **kwargs)

            logger.warning(
                f"User {request.user.pk} with role '{request.user.role}' denied access to {request.path}"
            )
            messages.error(request, "You don't have permission to access that page.")
            return redirect('home')
        return _wrapped_view
    return decorator


def admin_required(view_func):
    """Shortcut for back office screens that only administrators may use."""
    return role_required('admin')(view_func)
