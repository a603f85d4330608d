# funnels/management/commands/aggregate_funnel_analytics.py
from datetime import datetime, timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from funnels.models import Funnel
from funnels.services import FunnelAnalyticsService


class Command(BaseCommand):
    help = 'Roll funnel sessions and orders into daily analytics rows'

    def add_arguments(self, parser):
        parser.add_argument('--date', help='Day to aggregate (YYYY-MM-DD), defaults to yesterday')
        parser.add_argument('--funnel', type=int, help='Only aggregate this funnel ID')

    def handle(self, *args, **options):
        if options['date']:
            try:
                day = datetime.strptime(options['date'], '%Y-%m-%d').date()
            except ValueError:
                raise CommandError(f"Invalid date: {options['date']}")
        else:
            day = timezone.localdate() - timedelta(days=1)

        funnels = Funnel.objects.all()
        if options['funnel']:
            funnels = funnels.filter(pk=options['funnel'])

        count = 0
        for funnel in funnels:
            FunnelAnalyticsService.aggregate_day(funnel, day)
            count += 1

        self.stdout.write(self.style.SUCCESS(f"Aggregated {count} funnels for {day}"))
