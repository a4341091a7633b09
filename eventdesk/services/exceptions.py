class ServiceError(Exception):
    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class ValidationError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class AuthError(ServiceError):
    pass


class NotFoundError(ServiceError):
    pass


class CapacityError(ServiceError):
    """Requested seats exceed what is left; ``remaining`` is the exact count left."""

    def __init__(self, code: str, remaining: int) -> None:
        self.remaining = remaining
        noun = "seat" if remaining == 1 else "seats"
        super().__init__(code, f"Only {remaining} {noun} remaining")


class SendError(ServiceError):
    pass


class TransientError(ServiceError):
    """Store or network timeout; the operation may be retried."""


class InternalError(ServiceError):
    pass
