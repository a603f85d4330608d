# shared/services/receipts.py
"""
PDF receipts for orders and payments.
"""
import logging
from io import BytesIO

from django.utils import timezone
from django.utils.html import escape
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from shared.exceptions.payment import ReceiptGenerationError
from shared.utils import format_money

logger = logging.getLogger(__name__)

TABLE_STYLE = TableStyle([
    ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
    ('ALIGN', (-1, 1), (-1, -1), 'RIGHT'),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTSIZE', (0, 0), (-1, 0), 11),
    ('BOTTOMPADDING', (0, 0), (-1, 0), 10),
    ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
    ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
])


class ReceiptService:
    """Builds A4 receipts with reportlab."""

    @staticmethod
    def _site_name():
        from site_settings.services import SettingsService
        return SettingsService.get_site_config()['name']

    @staticmethod
    def _render(title, info_lines, rows, total_label, total_amount, notes=None):
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, title=title)
        styles = getSampleStyleSheet()
        elements = [
            Paragraph(f"<b>{escape(ReceiptService._site_name())}</b>", styles['Title']),
            Paragraph(f"<b>{escape(title)}</b>", styles['Heading2']),
            Spacer(1, 12),
        ]

        info = "<br/>".join(f"<b>{escape(label)}:</b> {escape(str(value))}" for label, value in info_lines)
        elements.append(Paragraph(info, styles['Normal']))
        elements.append(Spacer(1, 16))

        data = [['Description', 'Qty', 'Amount']]
        data.extend(rows)
        data.append([total_label, '', format_money(total_amount)])

        table = Table(data, colWidths=['*', 50, 110])
        table.setStyle(TABLE_STYLE)
        elements.append(table)
        elements.append(Spacer(1, 16))

        if notes:
            elements.append(Paragraph(f"<b>Notes:</b> {escape(notes)}".replace('\n', '<br/>'), styles['Normal']))
            elements.append(Spacer(1, 12))

        elements.append(Paragraph(
            f"Generated on {timezone.localtime().strftime('%d/%m/%Y %I:%M %p')}<br/>"
            "This is a computer generated receipt",
            styles['Normal']
        ))

        doc.build(elements)
        return buffer.getvalue()

    @staticmethod
    def build_order_receipt(order) -> bytes:
        try:
            rows = [
                [item.description, str(item.quantity), format_money(item.total_price)]
                for item in order.items.all()
            ]
            info = [
                ('Receipt No', order.order_number),
                ('Date', timezone.localtime(order.paid_at or order.created_at).strftime('%d/%m/%Y %I:%M %p')),
                ('Student', order.student.display_name),
                ('Course', order.course.name if order.course else 'N/A'),
                ('Status', order.get_status_display()),
            ]
            if order.period_start and order.period_end:
                info.append(('Billing Period', f"{order.period_start:%d/%m/%Y} - {order.period_end:%d/%m/%Y}"))

            return ReceiptService._render(
                'Order Receipt', info, rows, 'Total', order.amount, order.notes
            )
        except Exception as e:
            logger.error(f"Receipt generation failed for order {order.order_number}: {e}", exc_info=True)
            raise ReceiptGenerationError("Could not generate the receipt.", user_friendly=True, original_error=e)

    @staticmethod
    def build_payment_receipt(payment) -> bytes:
        try:
            description = (
                f"Invoice {payment.invoice.invoice_number}" if payment.invoice else 'Payment'
            )
            info = [
                ('Receipt No', payment.reference or f"PAY-{payment.pk:06d}"),
                ('Date', timezone.localtime(payment.paid_at or payment.created_at).strftime('%d/%m/%Y %I:%M %p')),
                ('Student', payment.user.display_name),
                ('Payment Method', payment.get_payment_type_display()),
                ('Status', payment.get_status_display()),
            ]
            return ReceiptService._render(
                'Payment Receipt', info, [[description, '1', format_money(payment.amount)]],
                'Amount Paid', payment.amount,
            )
        except Exception as e:
            logger.error(f"Receipt generation failed for payment {payment.pk}: {e}", exc_info=True)
            raise ReceiptGenerationError("Could not generate the receipt.", user_friendly=True, original_error=e)
