class AppException(Exception):
    """Base application exception."""

    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or ""


class MisconfiguredError(AppException):
    """Required secret or connection setting is missing."""

    # Webhook processing is disabled, not broken
    status_code = 400


class InvalidSignatureError(AppException):
    """Webhook signature verification failed."""

    status_code = 400


class InvalidPayloadError(AppException):
    """Webhook payload could not be parsed."""

    status_code = 400


class MissingIdentityError(AppException):
    """Required customer identity is absent from the event."""

    status_code = 400


class NotFoundError(AppException):
    """Resource not found exception."""

    status_code = 404


class SubscriberNotFoundError(NotFoundError):
    """Subscriber not found."""

    def __init__(self, email: str):
        super().__init__(f"Subscriber not found: {email}")
        self.email = email


class StorageError(AppException):
    """Storage operation error exception."""

    status_code = 503


class StoreUnavailableError(StorageError):
    """Subscriber store is unavailable."""
