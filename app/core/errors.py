"""
Error taxonomy for the identity and session services.

Services raise these; the handlers installed in app.main turn every
AppError into the standard envelope {"success": false, "message": ...}
with the status code carried by the error class.
"""

from fastapi import status


class AppError(Exception):
    """Base class for expected, client-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Request failed"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MissingCredential(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Access token required"


class InvalidOrExpiredCredential(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired token"


class RegistrationRequired(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User not found. Please provide a name to register."


class RefreshTokenMismatch(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid refresh token"


class RefreshTokenExpired(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Refresh token expired"


class IdentityNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class AddressNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Address not found"


class OrderNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Order not found"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Unauthorized access to this resource"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class PaymentVerificationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Payment verification failed"


class PersistenceError(AppError):
    """The store is unavailable or rejected a write. Fatal for the request."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"
