# live/management/commands/generate_live_sessions.py
from datetime import datetime

from django.core.management.base import BaseCommand, CommandError

from live.services import LiveScheduleService


class Command(BaseCommand):
    help = 'Create scheduled live sessions for the coming week from recurring schedules'

    def add_arguments(self, parser):
        parser.add_argument('--start', help='First day to cover (YYYY-MM-DD), defaults to today')
        parser.add_argument('--days', type=int, default=7, help='Number of days to cover')

    def handle(self, *args, **options):
        start_date = None
        if options['start']:
            try:
                start_date = datetime.strptime(options['start'], '%Y-%m-%d').date()
            except ValueError:
                raise CommandError(f"Invalid start date: {options['start']}")

        if options['days'] < 1:
            raise CommandError("--days must be at least 1")

        created = LiveScheduleService.generate_sessions(start_date=start_date, days=options['days'])
        self.stdout.write(self.style.SUCCESS(f"Created {created} live sessions"))
