# core/middleware.py
"""
Back office middleware: security headers, exception handling, request logging.
"""
import logging
import time

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from .exceptions import BackOfficeException

logger = logging.getLogger(__name__)


# ============ SECURITY HEADERS MIDDLEWARE ============

class SecurityHeadersMiddleware:
    """Adds baseline security headers."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if response is None or callable(response):
            return response

        response["X-Content-Type-Options"] = "nosniff"
        response["X-Frame-Options"] = "DENY"
        response["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Receipts are rendered inline in the browser's PDF viewer
        if request.path.endswith("/receipt/"):
            response["Content-Security-Policy"] = "default-src 'self'; object-src 'self'"

        return response


# ============ EXCEPTION HANDLING MIDDLEWARE ============

class ExceptionHandlingMiddleware:
    """Turns BackOfficeException into a flash message or an error page."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, BackOfficeException):
            logger.error(f"System exception on {request.path}: {exception}", exc_info=True)
            return None

        logger.warning(f"Business exception on {request.path}: {exception}")

        if exception.user_friendly and hasattr(request, '_messages'):
            messages.error(request, exception.message)
            return redirect(self._safe_referer(request))

        return render(request, "core/error_page.html", {
            "error_code": 400,
            "error_message": exception.message if exception.user_friendly else "Operation failed.",
        }, status=400)

    def _safe_referer(self, request) -> str:
        referer = request.META.get("HTTP_REFERER")
        if referer and url_has_allowed_host_and_scheme(
            referer, allowed_hosts={request.get_host()}, require_https=request.is_secure()
        ):
            return referer
        return "/"


# ============ REQUEST LOGGING MIDDLEWARE ============

class RequestLoggingMiddleware:
    """Request/response logging with slow request warnings."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # Skip logging for static files and health checks
        if self._should_skip_logging(request):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        duration = time.monotonic() - started

        user_id = getattr(request.user, "id", None) if hasattr(request, 'user') else None
        status_code = getattr(response, "status_code", None)

        if duration > getattr(settings, 'SLOW_REQUEST_THRESHOLD', 1.0):
            logger.warning(
                f"Slow request {request.method} {request.path} -> {status_code} "
                f"in {duration:.2f}s (user={user_id})"
            )
        else:
            logger.debug(
                f"{request.method} {request.path} -> {status_code} "
                f"in {duration:.3f}s (user={user_id}, ip={self._get_client_ip(request)})"
            )

        return response

    def _should_skip_logging(self, request) -> bool:
        """Skip logging for noisy requests."""
        skip_paths = ['/static/', '/media/', '/favicon.ico', '/health/']
        return any(request.path.startswith(path) for path in skip_paths)

    def _get_client_ip(self, request) -> str:
        xff = request.META.get("HTTP_X_FORWARDED_FOR")
        return xff.split(",")[0] if xff else request.META.get("REMOTE_ADDR", "unknown")
