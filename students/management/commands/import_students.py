# students/management/commands/import_students.py
from django.core.management.base import BaseCommand, CommandError

from core.exceptions import StudentImportError
from students.services import StudentImportService


class Command(BaseCommand):
    help = 'Import students from a CSV file'

    def add_arguments(self, parser):
        parser.add_argument('csv_path', help='Path to the CSV file')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Validate the file without importing',
        )

    def handle(self, *args, **options):
        service = StudentImportService()

        try:
            with open(options['csv_path'], encoding='utf-8-sig') as handle:
                service.parse_csv(handle.read())
        except FileNotFoundError:
            raise CommandError(f"CSV file not found: {options['csv_path']}")
        except StudentImportError as e:
            raise CommandError(e.message)

        rows = service.validate_data()
        stats = service.stats()
        self.stdout.write(
            f"{stats['total']} rows: {stats['valid']} valid, "
            f"{stats['warning']} with warnings, {stats['invalid']} invalid"
        )

        for row in rows:
            for error in row['errors']:
                self.stdout.write(self.style.WARNING(f"Row {row['data']['_row_number']}: {error}"))

        if options['dry_run']:
            return

        result = service.import_valid_data()
        self.stdout.write(
            self.style.SUCCESS(
                f"Imported {result['imported']}, updated {result['updated']}, "
                f"skipped {result['skipped']}"
            )
        )
