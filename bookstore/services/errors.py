"""
Service-level exceptions.

Business logic (token lifecycle, book facade) raises these instead of
building HTTP responses itself. Each carries the HTTP status it maps to; the
application factory registers one exception handler that renders any of
them as {"detail": message}.
"""


class ServiceError(Exception):
    """Base class for all service-level errors."""

    status_code: int = 500
    headers: dict[str, str] | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(ServiceError):
    """Missing, malformed, expired or otherwise unacceptable credentials."""

    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class SessionExpired(Unauthorized):
    """Cookie session could not be refreshed; the auth cookies are cleared."""


class Forbidden(ServiceError):
    """Authenticated, but the role lacks a required permission."""

    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    """A unique field (e.g. user name) is already taken."""

    status_code = 409


class ValidationFailed(ServiceError):
    status_code = 422


class InternalServerError(ServiceError):
    status_code = 500


class TokenGenerationError(InternalServerError):
    """Signing a token failed."""


class GatewayTimeout(ServiceError):
    """A downstream service did not answer."""

    status_code = 504


def error_for_status(status_code: int, message: str) -> ServiceError:
    """
    Build the service error matching an HTTP status.

    Statuses without a dedicated class keep their code on a plain
    ServiceError so the gateway can pass them through unchanged.
    """
    for error_class in (
        Unauthorized,
        Forbidden,
        NotFound,
        Conflict,
        ValidationFailed,
        GatewayTimeout,
        InternalServerError,
    ):
        if error_class.status_code == status_code:
            return error_class(message)

    error = ServiceError(message)
    error.status_code = status_code
    return error
