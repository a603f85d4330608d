# config/views.py
"""
Top level views: dashboard, health check and error handlers.
"""
import logging

from django.contrib.auth.decorators import login_required
from django.db import connection
from django.db.models import Sum
from django.db.utils import OperationalError
from django.http import JsonResponse
from django.shortcuts import render
from django.utils import timezone

from billing.models import Order, Payment
from enrollments.models import Enrollment
from shared.constants import EnrollmentStatus, OrderStatus, PaymentStatus, PaymentTypes
from shared.utils import current_month, month_bounds
from students.models import Student
from teachers.models import Teacher

logger = logging.getLogger(__name__)


# ============================================================================
# DASHBOARD
# ============================================================================

@login_required
def home_view(request):
    """Back office dashboard; non admin roles get a welcome page."""
    if not request.user.is_admin:
        return render(request, 'core/welcome.html', {'page_title': 'Welcome'})

    start, end = month_bounds(current_month())

    revenue = Order.objects.filter(
        status=OrderStatus.PAID,
        paid_at__date__gte=start,
        paid_at__date__lte=end,
    ).aggregate(total=Sum('amount'))['total'] or 0

    context = {
        'page_title': 'Dashboard',
        'stats': {
            'students': Student.objects.count(),
            'teachers': Teacher.objects.filter(status='active').count(),
            'active_enrollments': Enrollment.objects.filter(
                status__in=EnrollmentStatus.OPEN
            ).count(),
            'pending_transfers': Payment.objects.filter(
                payment_type=PaymentTypes.BANK_TRANSFER,
                status=PaymentStatus.PENDING,
            ).count(),
            'revenue_this_month': revenue,
        },
        'recent_payments': Payment.objects.select_related('user').order_by('-created_at')[:5],
        'recent_enrollments': Enrollment.objects.select_related(
            'student__user', 'course'
        ).order_by('-created_at')[:5],
    }
    return render(request, 'core/dashboard.html', context)


# ============================================================================
# HEALTH & STATUS
# ============================================================================

def health_check_view(request):
    """System health check endpoint."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        db_status = True
    except OperationalError:
        logger.error("Health check could not reach the database", exc_info=True)
        db_status = False

    status_code = 200 if db_status else 503

    return JsonResponse({
        'status': 'healthy' if db_status else 'unhealthy',
        'database': 'connected' if db_status else 'disconnected',
        'timestamp': timezone.now().isoformat(),
    }, status=status_code)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def handler404(request, exception):
    context = {
        'page_title': 'Page Not Found',
        'error_code': 404,
        'error_message': 'The page you are looking for does not exist.',
    }
    return render(request, 'errors/404.html', context, status=404)


def handler500(request):
    context = {
        'page_title': 'Server Error',
        'error_code': 500,
        'error_message': 'Something went wrong on our end.',
    }
    return render(request, 'errors/500.html', context, status=500)


def handler403(request, exception):
    context = {
        'page_title': 'Access Denied',
        'error_code': 403,
        'error_message': 'You do not have permission to access this page.',
    }
    return render(request, 'errors/403.html', context, status=403)


def handler400(request, exception):
    context = {
        'page_title': 'Bad Request',
        'error_code': 400,
        'error_message': 'Your request could not be processed.',
    }
    return render(request, 'errors/400.html', context, status=400)
