class StorefrontError(Exception):
    """Base class for errors surfaced to the visitor. `status_code` is the HTTP status used by the API."""

    status_code = 400


class NotFound(StorefrontError):
    status_code = 404


class InvalidArgument(StorefrontError):
    status_code = 400


class EmptyCart(StorefrontError):
    status_code = 409


class Unauthenticated(StorefrontError):
    status_code = 401


class PaymentDeclined(StorefrontError):
    """Raised when the gateway rejects the card or the charge. Not retryable with the same card."""

    status_code = 402


class GatewayUnavailable(StorefrontError):
    """Raised for network errors and timeouts talking to the gateway. The visitor may retry."""

    status_code = 503


class PersistenceFailure(StorefrontError):
    status_code = 500
