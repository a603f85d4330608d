# billing/tests/helpers.py
from decimal import Decimal

from billing.models import Invoice, Payment
from students.models import Student
from users.models import User


def make_bank_transfer(amount=Decimal('150.00'), invoice_amount=None, email='aisyah@example.com', **kwargs):
    user = User.objects.create_user(email=email, name='Nur Aisyah')
    student = Student.objects.create(user=user, phone='60123456789')
    invoice = Invoice.objects.create(student=student, amount=invoice_amount or amount, status='sent')
    return Payment.objects.create(user=user, invoice=invoice, amount=amount, payment_type='bank_transfer', **kwargs)
