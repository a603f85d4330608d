# shared/services/email.py
"""
Outgoing email built from templates, sent with the SMTP settings
stored in the settings screen when they are configured.
"""
import logging
from typing import Dict, List, Optional

from django.conf import settings
from django.core.mail import get_connection, send_mail
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)

TEST_EMAIL_BODY = "This is a test email from your email settings configuration."


class EmailService:
    """Service for back office email communications."""

    @staticmethod
    def _email_config() -> Dict:
        from site_settings.services import SettingsService
        return SettingsService.get_email_config()

    @staticmethod
    def get_from_email(config: Optional[Dict] = None) -> str:
        config = config or EmailService._email_config()
        from_address = config.get('from_address')
        if not from_address:
            return settings.DEFAULT_FROM_EMAIL
        from_name = config.get('from_name')
        return f"{from_name} <{from_address}>" if from_name else from_address

    @staticmethod
    def get_connection(config: Optional[Dict] = None, fail_silently: bool = False):
        """
        Build a mail connection from the stored SMTP settings.
        Falls back to the project EMAIL_* configuration when no host is stored.
        """
        config = config or EmailService._email_config()
        if not config.get('smtp_host'):
            return get_connection(fail_silently=fail_silently)

        encryption = (config.get('smtp_encryption') or 'tls').lower()
        return get_connection(
            fail_silently=fail_silently,
            host=config['smtp_host'],
            port=int(config.get('smtp_port') or 587),
            username=config.get('smtp_username') or '',
            password=config.get('smtp_password') or '',
            use_tls=encryption == 'tls',
            use_ssl=encryption == 'ssl',
        )

    @staticmethod
    def send_template_email(subject: str, template_name: str, context: Dict,
                            recipient_list: List[str], fail_silently: bool = False) -> bool:
        """
        Generic method for sending template-based emails.

        Args:
            subject: Email subject
            template_name: Template path without extension
            context: Template context
            recipient_list: List of recipient emails
            fail_silently: Whether to suppress exceptions

        Returns:
            bool: True if email sent successfully
        """
        try:
            config = EmailService._email_config()
            html_message = render_to_string(f'{template_name}.html', context)
            plain_message = strip_tags(html_message)

            send_mail(
                subject,
                plain_message,
                EmailService.get_from_email(config),
                recipient_list,
                html_message=html_message,
                fail_silently=fail_silently,
                connection=EmailService.get_connection(config, fail_silently),
            )

            logger.info(f"Email '{subject}' sent to {len(recipient_list)} recipients")
            return True

        except Exception as e:
            logger.error(f"Failed to send email '{subject}': {str(e)}", exc_info=True)
            if not fail_silently:
                raise
            return False

    @staticmethod
    def send_payment_confirmation(payment) -> bool:
        """Tell the student their payment was accepted."""
        return EmailService.send_template_email(
            subject=f"Payment Confirmed - {payment.formatted_amount}",
            template_name='emails/payment_confirmation',
            context={
                'payment': payment,
                'student_name': payment.user.display_name,
                'invoice': payment.invoice,
            },
            recipient_list=[payment.user.email],
        )

    @staticmethod
    def send_payment_failed(payment, reason: str) -> bool:
        """Tell the student their payment was rejected and why."""
        return EmailService.send_template_email(
            subject=f"Payment Unsuccessful - {payment.formatted_amount}",
            template_name='emails/payment_failed',
            context={
                'payment': payment,
                'student_name': payment.user.display_name,
                'invoice': payment.invoice,
                'reason': reason,
            },
            recipient_list=[payment.user.email],
        )

    @staticmethod
    def send_test_email(recipient: str) -> bool:
        """Send a plain test message with the stored SMTP settings."""
        config = EmailService._email_config()
        send_mail(
            f"Test Email from {config.get('from_name') or 'Mudeer Bedaie'}",
            TEST_EMAIL_BODY,
            EmailService.get_from_email(config),
            [recipient],
            connection=EmailService.get_connection(config),
        )
        logger.info(f"Test email sent to {recipient}")
        return True
