# funnels/views.py
"""
Funnel list and analytics dashboard.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.decorators import admin_required
from core.permissions import IsBackOfficeAdmin
from shared.constants import FunnelStatus

from .models import Funnel
from .serializers import ChartPointSerializer
from .services import PERIODS, FunnelAnalyticsService, normalize_period

logger = logging.getLogger(__name__)


@login_required
@admin_required
def funnel_list_view(request):
    funnels = Funnel.objects.select_related('user')

    search_query = request.GET.get('search', '').strip()
    status_filter = request.GET.get('status', '')

    if search_query:
        funnels = funnels.filter(Q(name__icontains=search_query) | Q(description__icontains=search_query))
    if status_filter:
        funnels = funnels.filter(status=status_filter)

    page_obj = Paginator(funnels, 20).get_page(request.GET.get('page'))

    context = {
        'funnels': page_obj,
        'page_obj': page_obj,
        'status_choices': FunnelStatus.CHOICES,
        'search_query': search_query,
        'status_filter': status_filter,
        'page_title': 'Funnels',
    }
    return render(request, 'funnels/funnel_list.html', context)


@login_required
@admin_required
def funnel_detail_view(request, funnel_id):
    funnel = get_object_or_404(Funnel, pk=funnel_id)
    period = normalize_period(request.GET.get('period'))

    context = {
        'funnel': funnel,
        'period': period,
        'periods': PERIODS,
        'summary': FunnelAnalyticsService.summary(funnel, period),
        'steps': FunnelAnalyticsService.step_breakdown(funnel, period),
        'recent_orders': FunnelAnalyticsService.recent_orders(funnel),
        'recent_sessions': FunnelAnalyticsService.recent_sessions(funnel),
        'page_title': funnel.name,
    }
    return render(request, 'funnels/funnel_detail.html', context)


FUNNEL_ACTIONS = {
    'publish': "Funnel published successfully!",
    'unpublish': "Funnel unpublished.",
    'archive': "Funnel archived.",
}


@login_required
@admin_required
@require_POST
def funnel_action_view(request, funnel_id, action):
    funnel = get_object_or_404(Funnel, pk=funnel_id)

    if action not in FUNNEL_ACTIONS:
        messages.error(request, "Unknown funnel action.")
        return redirect('funnels:funnel_detail', funnel_id=funnel.pk)

    getattr(funnel, action)()
    messages.success(request, FUNNEL_ACTIONS[action])
    return redirect('funnels:funnel_detail', funnel_id=funnel.pk)


@login_required
@admin_required
@require_POST
def funnel_duplicate_view(request, funnel_id):
    funnel = get_object_or_404(Funnel, pk=funnel_id)
    name = request.POST.get('name', '').strip()[:255] or None
    copy = funnel.duplicate(name)
    messages.success(request, f"Funnel duplicated as \"{copy.name}\".")
    return redirect('funnels:funnel_detail', funnel_id=copy.pk)


# ============ API ============

@api_view(['GET'])
@permission_classes([IsAuthenticated, IsBackOfficeAdmin])
def funnel_chart_api(request, funnel_id):
    funnel = get_object_or_404(Funnel, pk=funnel_id)
    period = normalize_period(request.query_params.get('period'))
    points = FunnelAnalyticsService.chart_data(funnel, period)
    return Response({
        'period': period,
        'data': ChartPointSerializer(points, many=True).data,
    })
