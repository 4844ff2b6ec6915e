class MpesaError(Exception):
    """Base error for the M-Pesa integration. `details` carries upstream data when known."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else message


class MpesaAuthError(MpesaError):
    """Could not obtain an OAuth access token from Daraja."""


class MpesaRequestError(MpesaError):
    """The STK push request failed, timed out or was rejected."""


class PaymentValidationError(MpesaError):
    """Client input was rejected before anything was sent to Daraja."""


class CallbackFormatError(MpesaError):
    """The callback body is missing the Body.stkCallback envelope."""


class MissingMetadataError(MpesaError):
    """A successful callback arrived without CallbackMetadata.Item."""


class PaymentInitiationError(MpesaError):
    """Raised client side when /stkpush does not hand back a CheckoutRequestID."""
