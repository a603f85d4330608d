# students/services.py
"""
Student services: profile creation/update and CSV import/export.
"""
import csv
import io
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from core.exceptions import StudentImportError
from shared.constants import StudentStatus, UserRoles
from shared.utils import digits_only, normalize_phone

from .forms import StudentImportRowForm
from .models import Student

logger = logging.getLogger(__name__)

User = get_user_model()

DEFAULT_IMPORT_PASSWORD = 'password123'
DEFAULT_NATIONALITY = 'Malaysian'


def generated_email(phone):
    """Placeholder email for students imported or created without one."""
    return f"student{digits_only(phone)}@example.com"


class StudentService:
    """Create and update students with their user accounts."""

    @staticmethod
    @transaction.atomic
    def create_student(data, created_by=None):
        phone = normalize_phone(data.get('country_code'), data.get('phone')) or None
        email = data.get('email') or generated_email(phone)

        user = User.objects.create_user(
            email=email,
            password=data['password'],
            name=data['name'],
            phone=phone,
            role=UserRoles.STUDENT,
        )

        student = Student.objects.create(
            user=user,
            ic_number=data.get('ic_number') or None,
            phone=phone,
            address=data.get('address') or '',
            date_of_birth=data.get('date_of_birth'),
            gender=data.get('gender') or '',
            nationality=data.get('nationality') or '',
            status=data.get('status') or StudentStatus.ACTIVE,
        )

        logger.info(
            f"Student {student.student_id} created by "
            f"{created_by.email if created_by else 'system'}"
        )
        return student

    @staticmethod
    @transaction.atomic
    def update_student(student, data):
        phone = normalize_phone(data.get('country_code'), data.get('phone')) or None

        user = student.user
        user.name = data['name']
        if data.get('email'):
            user.email = data['email']
        user.phone = phone
        if data.get('password'):
            user.set_password(data['password'])
        user.save()

        student.ic_number = data.get('ic_number') or None
        student.phone = phone
        student.address = data.get('address') or ''
        student.date_of_birth = data.get('date_of_birth')
        student.gender = data.get('gender') or ''
        student.nationality = data.get('nationality') or ''
        student.status = data['status']
        student.save()

        logger.info(f"Student {student.student_id} updated")
        return student

    @staticmethod
    @transaction.atomic
    def delete_student(student):
        """Remove the student profile together with its user account."""
        student_id = student.student_id
        student.user.delete()
        logger.info(f"Student {student_id} deleted")


class StudentImportService:
    """
    Parse, validate and import students from CSV.

    Usage::

        service = StudentImportService()
        service.parse_csv(content)
        rows = service.validate_data()
        result = service.import_valid_data()

    Validated rows are plain dicts so they can be kept in the session
    between the preview and the confirm step.
    """

    REQUIRED_HEADERS = ['name', 'phone']
    EXPECTED_HEADERS = [
        'name',
        'email',
        'student_id',
        'ic_number',
        'phone',
        'address',
        'date_of_birth',
        'gender',
        'nationality',
        'status',
    ]

    STATUS_VALID = 'valid'
    STATUS_WARNING = 'warning'
    STATUS_INVALID = 'invalid'

    def __init__(self, validated_data=None):
        self.csv_data = []
        self.validated_data = validated_data or []

    # ============ PARSING ============

    @staticmethod
    def read_upload(uploaded_file):
        """Decode an uploaded file, tolerating a UTF-8 BOM."""
        raw = uploaded_file.read()
        try:
            return raw.decode('utf-8-sig')
        except UnicodeDecodeError:
            raise StudentImportError(
                'Unable to read CSV file. Please save it as UTF-8.',
                user_friendly=True,
            )

    def parse_csv(self, content):
        """Parse CSV text into row dicts keyed by header."""
        self.csv_data = []
        reader = csv.reader(io.StringIO(content))

        headers = next(reader, None)
        if not headers or not any(cell.strip() for cell in headers):
            raise StudentImportError('CSV file appears to be empty', user_friendly=True)

        headers = [header.strip().lower() for header in headers]

        missing = [header for header in self.REQUIRED_HEADERS if header not in headers]
        if missing:
            raise StudentImportError(
                f"Missing required columns: {', '.join(missing)}",
                user_friendly=True,
                details={'missing': missing},
            )

        row_number = 1
        for row in reader:
            row_number += 1

            if not any(cell.strip() for cell in row):
                continue

            row = (row + [''] * len(headers))[:len(headers)]
            row_data = dict(zip(headers, (cell.strip() for cell in row)))
            row_data['_row_number'] = row_number
            self.csv_data.append(row_data)

        if not self.csv_data:
            raise StudentImportError('No data rows found in CSV file', user_friendly=True)

        logger.info(f"Parsed {len(self.csv_data)} student rows from CSV")
        return self.csv_data

    # ============ VALIDATION ============

    def validate_data(self):
        """Classify every parsed row as valid, warning or invalid."""
        self.validated_data = []

        for index, row in enumerate(self.csv_data):
            form = StudentImportRowForm(data=row)

            status = self.STATUS_VALID
            errors = []
            if not form.is_valid():
                status = self.STATUS_INVALID
                errors = form.error_messages_list()

            warnings = self.check_duplicates(row)
            if warnings and status == self.STATUS_VALID:
                status = self.STATUS_WARNING

            self.validated_data.append({
                'data': row,
                'status': status,
                'errors': errors,
                'warnings': warnings,
                'index': index,
                'row_number': row.get('_row_number'),
            })

        return self.validated_data

    @staticmethod
    def check_duplicates(row):
        warnings = []

        if row.get('phone') and Student.objects.filter(phone=row['phone']).exists():
            warnings.append('Phone number already exists - will update existing record')

        if row.get('email') and User.objects.filter(email__iexact=row['email']).exists():
            warnings.append('Email already exists - will update existing record')

        if row.get('ic_number') and Student.objects.filter(ic_number=row['ic_number']).exists():
            warnings.append('IC number already exists - will update existing record')

        return warnings

    def stats(self):
        counts = {self.STATUS_VALID: 0, self.STATUS_WARNING: 0, self.STATUS_INVALID: 0}
        for item in self.validated_data:
            counts[item['status']] += 1
        counts['total'] = len(self.validated_data)
        counts['importable'] = counts[self.STATUS_VALID] + counts[self.STATUS_WARNING]
        return counts

    # ============ IMPORT ============

    @staticmethod
    def find_existing_student(data):
        """Match by phone, then email, then IC number."""
        if data.get('phone'):
            student = Student.objects.filter(phone=data['phone']).select_related('user').first()
            if student:
                return student

        if data.get('email'):
            student = Student.objects.filter(user__email__iexact=data['email']).select_related('user').first()
            if student:
                return student

        if data.get('ic_number'):
            student = Student.objects.filter(ic_number=data['ic_number']).select_related('user').first()
            if student:
                return student

        return None

    def import_valid_data(self):
        """Create or update students for every valid and warning row."""
        imported = 0
        updated = 0
        skipped = 0
        errors = []

        for item in self.validated_data:
            if item['status'] == self.STATUS_INVALID:
                skipped += 1
                continue

            data = item['data']
            try:
                with transaction.atomic():
                    existing = self.find_existing_student(data)
                    if existing:
                        self._update_student(existing, data)
                        updated += 1
                    else:
                        self._create_student(data)
                        imported += 1
            except Exception as e:
                logger.warning(f"Student import row {data.get('_row_number')} failed: {e}")
                skipped += 1
                errors.append({
                    'row': data.get('_row_number'),
                    'error': str(e),
                })

        result = {
            'imported': imported,
            'updated': updated,
            'skipped': skipped,
            'errors': errors,
            'total': len(self.validated_data),
        }
        logger.info(
            f"Student import finished: {imported} imported, {updated} updated, {skipped} skipped"
        )
        return result

    @staticmethod
    def _clean_row(data):
        """Typed values for a row that already passed validation."""
        form = StudentImportRowForm(data=data)
        form.is_valid()
        return form.cleaned_data

    def _create_student(self, data):
        cleaned = self._clean_row(data)
        email = cleaned.get('email') or generated_email(data['phone'])

        user = User.objects.create_user(
            email=email,
            password=DEFAULT_IMPORT_PASSWORD,
            name=cleaned['name'],
            phone=cleaned['phone'],
            role=UserRoles.STUDENT,
        )

        return Student.objects.create(
            user=user,
            ic_number=cleaned.get('ic_number') or None,
            phone=cleaned['phone'],
            address=cleaned.get('address') or '',
            date_of_birth=cleaned.get('date_of_birth'),
            gender=cleaned.get('gender') or '',
            nationality=cleaned.get('nationality') or DEFAULT_NATIONALITY,
            status=cleaned.get('status') or StudentStatus.ACTIVE,
        )

    def _update_student(self, student, data):
        cleaned = self._clean_row(data)

        user = student.user
        user.name = cleaned['name']
        if cleaned.get('email'):
            user.email = cleaned['email']
        user.save()

        student.ic_number = cleaned.get('ic_number') or student.ic_number
        student.phone = cleaned['phone']
        student.address = cleaned.get('address') or student.address
        student.date_of_birth = cleaned.get('date_of_birth') or student.date_of_birth
        student.gender = cleaned.get('gender') or student.gender
        student.nationality = cleaned.get('nationality') or student.nationality
        student.status = cleaned.get('status') or student.status
        student.save()
        return student

    # ============ EXPORT ============

    def export_to_csv(self, students=None):
        """CSV text for the given students (all students by default)."""
        if students is None:
            students = Student.objects.select_related('user').all()

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(self.EXPECTED_HEADERS)

        for student in students:
            writer.writerow([
                student.user.name,
                student.user.email,
                student.student_id,
                student.ic_number or '',
                student.phone or '',
                student.address or '',
                student.date_of_birth.strftime('%Y-%m-%d') if student.date_of_birth else '',
                student.gender or '',
                student.nationality or '',
                student.status or StudentStatus.ACTIVE,
            ])

        return output.getvalue()

    def generate_sample_csv(self):
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(self.EXPECTED_HEADERS)
        writer.writerow([
            'John Doe', 'john.doe@example.com', '', '123456789012', '+60123456789',
            '123 Main Street, Kuala Lumpur', '1995-05-15', 'male', 'Malaysian', 'active',
        ])
        writer.writerow([
            'Jane Smith', '', '', '987654321098', '+60198765432',
            '456 Oak Avenue, Penang', '1997-08-22', 'female', 'Malaysian', 'active',
        ])
        return output.getvalue()

    @staticmethod
    def export_filename():
        return f"students_export_{timezone.localtime().strftime('%Y-%m-%d_%H-%M-%S')}.csv"
