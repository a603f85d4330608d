# shared/exceptions/payment.py
"""
Payment document exceptions.
"""


class ReceiptGenerationError(Exception):
    """Raised when a PDF receipt cannot be produced."""

    def __init__(self, message, user_friendly=False, original_error=None):
        self.message = message
        self.user_friendly = user_friendly
        self.original_error = original_error
        super().__init__(self.message)
