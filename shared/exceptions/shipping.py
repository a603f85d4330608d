# shared/exceptions/shipping.py
"""
Shipping carrier exceptions.
"""


class ShippingError(Exception):
    """Base exception for carrier integrations."""

    def __init__(self, message, user_friendly=False, original_error=None):
        self.message = message
        self.user_friendly = user_friendly
        self.original_error = original_error
        super().__init__(self.message)


class ShippingConfigurationError(ShippingError):
    """Raised when carrier credentials are missing."""
    pass


class ShippingGatewayError(ShippingError):
    """Raised when the carrier API cannot be reached or answers with an error."""
    pass
