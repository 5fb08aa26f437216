"""
Nepify Storefront - Custom Exceptions
=======================================
Business-level exceptions that can be caught and converted to HTTP responses.

Three families:
  - transport: the remote API could not be reached or answered garbage
  - server-reported: the remote API answered with a non-2xx status
  - local validation: caught before any network call is made
"""

GENERIC_FAILURE = "Request failed"


class NepifyError(Exception):
    """Base exception for all storefront errors."""
    status_code = 400

    def __init__(self, message: str = GENERIC_FAILURE):
        self.message = message
        super().__init__(self.message)


# ==========================================
# Transport
# ==========================================

class TransportError(NepifyError):
    """Network unreachable, connection refused, or timeout."""
    status_code = 502


class ResponseParseError(NepifyError):
    """Remote API answered with a body that is not a JSON envelope."""
    status_code = 502


# ==========================================
# Server-reported
# ==========================================

class ApiRequestError(NepifyError):
    """Remote API answered with a non-2xx status."""

    def __init__(self, message: str = GENERIC_FAILURE, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


# ==========================================
# Local
# ==========================================

class AuthenticationError(NepifyError):
    """Raised when a route needs a bearer token and none was sent."""
    status_code = 401

    def __init__(self, message: str = "Sign in required"):
        super().__init__(message)


class ValidationError(NepifyError):
    """Raised for local validation failures (never sent to the server)."""
    pass


class CartValidationError(ValidationError):
    """Quantity out of range or above known stock."""
    pass


class AddressValidationError(ValidationError):
    """Required address fields are missing."""

    def __init__(self, missing):
        self.missing = list(missing)
        labels = ", ".join(f.replace("_", " ") for f in self.missing)
        super().__init__(f"Please fill in the required address fields: {labels}")


class EmptyCartError(ValidationError):
    """Checkout attempted with an empty cart."""

    def __init__(self):
        super().__init__("Your cart is empty")


class IllegalTransitionError(ValidationError):
    """Order status change that the workflow table does not allow."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from {current} to {target}")


class ReviewNotAllowedError(ValidationError):
    """Review composition blocked by the eligibility gate."""
    status_code = 403


class NotFoundError(NepifyError):
    """Raised when a requested resource doesn't exist."""
    status_code = 404
