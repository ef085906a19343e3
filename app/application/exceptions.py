class DraftStorageError(RuntimeError):
    """Raised when the draft store cannot persist or remove a draft."""
    pass


class DraftFormatError(ValueError):
    """Raised when a stored draft is unreadable or has an unknown schema version."""
    pass


class BookingApiError(RuntimeError):
    """Raised when the bookings backend rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BookingApiTimeoutError(BookingApiError):
    """Raised when the bookings backend does not answer within the configured timeout."""
    pass


class BookingApiUnavailableError(BookingApiError):
    """Raised when the bookings backend cannot be reached at all."""
    pass


class PaymentConfigurationError(RuntimeError):
    pass
