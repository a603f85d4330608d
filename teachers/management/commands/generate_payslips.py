# teachers/management/commands/generate_payslips.py
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from core.exceptions import PayslipError
from shared.utils import current_month
from teachers.services import PayslipGenerationService


class Command(BaseCommand):
    help = 'Generate draft payslips for every teacher with eligible sessions in a month'

    def add_arguments(self, parser):
        parser.add_argument('--month', default=None, help='Month as YYYY-MM (defaults to current month)')
        parser.add_argument('--generated-by', default=None, help='Email of the admin recorded as generator')

    def handle(self, *args, **options):
        month = options['month'] or current_month()

        generated_by = None
        if options['generated_by']:
            User = get_user_model()
            generated_by = User.objects.filter(email__iexact=options['generated_by']).first()
            if generated_by is None:
                raise CommandError(f"No user with email {options['generated_by']}")

        try:
            result = PayslipGenerationService.generate_for_all(month, generated_by)
        except PayslipError as e:
            raise CommandError(e.message)

        for error in result['errors']:
            self.stdout.write(self.style.WARNING(f"{error['teacher']}: {error['error']}"))

        self.stdout.write(
            self.style.SUCCESS(
                f"Generated {result['successful']} of {result['total_teachers']} payslips for {month}"
            )
        )
