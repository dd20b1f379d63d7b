"""Service-level error taxonomy.

Services raise these exceptions; the application maps each one to the
HTTP status stored on the class and a `{success: false, error}` body.
"""


class ServiceError(Exception):
    """Base class for errors raised at the service boundary."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """An entity id did not resolve."""
    status_code = 404


class InvalidArgumentError(ServiceError):
    """Validation failure: bad enum value, range, duplicate or ordering."""
    status_code = 400


class UnauthorizedError(ServiceError):
    """Bad credentials."""
    status_code = 401


class ForbiddenError(ServiceError):
    """The account exists but may not perform the operation."""
    status_code = 403
