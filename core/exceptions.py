# core/exceptions.py
class BackOfficeException(Exception):
    """Base exception for all back office errors."""

    def __init__(self, message=None, user_friendly=False, details=None, error_code=None):
        self.message = message or "An error occurred"
        self.user_friendly = user_friendly
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)

class PaymentReviewError(BackOfficeException):
    """Payment approval, rejection and refund errors."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Payment could not be updated", user_friendly, details, "PAYMENT_ERROR")

class StudentImportError(BackOfficeException):
    """CSV import errors that stop the whole file."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Student import failed", user_friendly, details, "IMPORT_ERROR")

class PayslipError(BackOfficeException):
    """Payslip generation and state errors."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Payslip operation failed", user_friendly, details, "PAYSLIP_ERROR")

class SessionStateError(BackOfficeException):
    """Invalid class session or live session transitions."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Session cannot change state", user_friendly, details, "SESSION_STATE_ERROR")

class SettingsError(BackOfficeException):
    """Settings store errors."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Settings could not be saved", user_friendly, details, "SETTINGS_ERROR")
