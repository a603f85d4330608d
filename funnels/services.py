# funnels/services.py
"""
Funnel analytics read from the daily FunnelAnalytics rollups.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Avg, Count, Sum
from django.db.models.functions import Coalesce

from shared.utils import period_start

from .models import FunnelAnalytics, FunnelOrder, FunnelSession

logger = logging.getLogger(__name__)

PERIODS = ('24h', '7d', '30d', '90d')
DEFAULT_PERIOD = '7d'
RECENT_LIMIT = 10


def normalize_period(period):
    return period if period in PERIODS else DEFAULT_PERIOD


def rate(conversions, visitors):
    if not visitors:
        return 0
    return round(conversions / visitors * 100, 2)


class FunnelAnalyticsService:

    @staticmethod
    def _rows(funnel, period):
        start = period_start(normalize_period(period)).date()
        return FunnelAnalytics.objects.filter(funnel=funnel, date__gte=start)

    @staticmethod
    def summary(funnel, period=DEFAULT_PERIOD):
        totals = FunnelAnalyticsService._rows(funnel, period).filter(step__isnull=True).aggregate(
            visitors=Coalesce(Sum('unique_visitors'), 0),
            pageviews=Coalesce(Sum('pageviews'), 0),
            conversions=Coalesce(Sum('conversions'), 0),
            revenue=Sum('revenue'),
            avg_time=Avg('avg_time_on_page'),
        )

        return {
            'period': normalize_period(period),
            'unique_visitors': totals['visitors'],
            'pageviews': totals['pageviews'],
            'conversions': totals['conversions'],
            'revenue': totals['revenue'] or Decimal('0'),
            'conversion_rate': rate(totals['conversions'], totals['visitors']),
            'avg_time_on_page': round(totals['avg_time'] or 0),
        }

    @staticmethod
    def step_breakdown(funnel, period=DEFAULT_PERIOD):
        totals = {
            row['step']: row
            for row in FunnelAnalyticsService._rows(funnel, period)
            .filter(step__isnull=False)
            .values('step')
            .annotate(
                visitors=Sum('unique_visitors'),
                pageviews=Sum('pageviews'),
                conversions=Sum('conversions'),
                revenue=Sum('revenue'),
            )
        }

        breakdown = []
        for step in funnel.steps.all():
            row = totals.get(step.pk, {})
            visitors = row.get('visitors') or 0
            conversions = row.get('conversions') or 0
            breakdown.append({
                'step': step,
                'unique_visitors': visitors,
                'pageviews': row.get('pageviews') or 0,
                'conversions': conversions,
                'revenue': row.get('revenue') or Decimal('0'),
                'conversion_rate': rate(conversions, visitors),
            })
        return breakdown

    @staticmethod
    def chart_data(funnel, period=DEFAULT_PERIOD):
        rows = (
            FunnelAnalyticsService._rows(funnel, period)
            .filter(step__isnull=True)
            .values('date')
            .annotate(
                visitors=Sum('unique_visitors'),
                conversions=Sum('conversions'),
                revenue=Sum('revenue'),
            )
            .order_by('date')
        )
        return [
            {
                'date': row['date'].isoformat(),
                'visitors': row['visitors'] or 0,
                'conversions': row['conversions'] or 0,
                'revenue': float(row['revenue'] or 0),
            }
            for row in rows
        ]

    @staticmethod
    def recent_orders(funnel, limit=RECENT_LIMIT):
        return FunnelOrder.objects.filter(session__funnel=funnel).select_related('step')[:limit]

    @staticmethod
    def recent_sessions(funnel, limit=RECENT_LIMIT):
        return funnel.sessions.select_related('current_step')[:limit]

    @staticmethod
    @transaction.atomic
    def aggregate_day(funnel, day):
        """
        Roll one day of sessions and orders into FunnelAnalytics rows.

        Writes one funnel-level row plus one row per step. Re-running for
        the same day replaces the counts.
        """
        sessions = FunnelSession.objects.filter(funnel=funnel, started_at__date=day)
        converted = FunnelSession.objects.filter(
            funnel=funnel, status=FunnelSession.STATUS_CONVERTED, converted_at__date=day
        )
        orders = FunnelOrder.objects.filter(session__funnel=funnel, created_at__date=day)

        FunnelAnalytics.objects.update_or_create(
            funnel=funnel, step=None, date=day,
            defaults={
                'unique_visitors': sessions.values('visitor_id').distinct().count(),
                'pageviews': sessions.count(),
                'conversions': converted.count(),
                'revenue': orders.aggregate(total=Sum('funnel_revenue'))['total'] or Decimal('0'),
            },
        )

        step_sessions = {
            row['current_step']: row
            for row in sessions.filter(current_step__isnull=False).values('current_step').annotate(
                visitors=Count('visitor_id', distinct=True),
                views=Count('id'),
            )
        }
        step_conversions = dict(
            converted.filter(current_step__isnull=False)
            .values('current_step')
            .annotate(total=Count('id'))
            .values_list('current_step', 'total')
        )
        step_revenue = dict(
            orders.filter(step__isnull=False)
            .values('step')
            .annotate(total=Sum('funnel_revenue'))
            .values_list('step', 'total')
        )

        for step in funnel.steps.all():
            row = step_sessions.get(step.pk, {})
            FunnelAnalytics.objects.update_or_create(
                funnel=funnel, step=step, date=day,
                defaults={
                    'unique_visitors': row.get('visitors', 0),
                    'pageviews': row.get('views', 0),
                    'conversions': step_conversions.get(step.pk, 0),
                    'revenue': step_revenue.get(step.pk) or Decimal('0'),
                },
            )

        logger.info(f"Aggregated analytics for funnel {funnel.pk} on {day}")
