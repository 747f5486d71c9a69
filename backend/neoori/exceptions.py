"""Error taxonomy shared by services and routes.

Every error carries the HTTP status it maps to, so the exception handler in
``neoori.main`` can render the envelope without inspecting messages.
"""


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidToken(Unauthorized):
    default_message = "Invalid or expired token"


class InvalidOrExpiredToken(Unauthorized):
    default_message = "Invalid or expired refresh token"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid email or password"


class AccountDeactivated(Unauthorized):
    default_message = "Account is deactivated"


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class AlreadyExists(Conflict):
    default_message = "User with this email already exists"


class InternalError(AppError):
    pass
