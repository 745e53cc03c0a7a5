"""Error taxonomy shared by routes, stores and clients.

Every error carries the HTTP status it maps to. The exception handlers in
``server.dependencies.errors`` turn them into ``{"success": false, "message": ...}``.
"""


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400


class AuthError(AppError):
    """Missing, unknown or inactive API key."""

    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class UpstreamError(AppError):
    """A container or the email provider failed."""

    status_code = 500


class StorageError(AppError):
    """Reading or writing a file-backed store failed."""

    status_code = 500
