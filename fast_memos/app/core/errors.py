"""
Typed failures raised by the service layer.

Services never translate these into HTTP responses themselves; the
exception handlers registered in ``main.create_app`` map each type to a
status code.
"""


class FastMemosError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(FastMemosError):
    """Caller input violates a documented constraint."""

    status_code = 400


class AuthError(FastMemosError):
    """Missing, malformed, expired or otherwise unusable credentials."""

    status_code = 401


class NotFound(FastMemosError):
    """Target record is absent or not owned by the caller."""

    status_code = 404


class DuplicateError(FastMemosError):
    """A unique value (username) is already taken."""

    status_code = 409


class StorageError(FastMemosError):
    """The underlying database failed.  Never retried."""

    status_code = 500
