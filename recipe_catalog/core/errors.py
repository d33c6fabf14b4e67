# core/errors.py
# Error taxonomy shared by the services and translated to HTTP responses in main.py.


class AppError(Exception):
    """
    Base class for errors that carry an HTTP status and a machine readable code.
    """

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class UpdateFailedError(AppError):
    """The record disappeared between the existence check and the write."""

    status_code = 500
    code = "UPDATE_FAILED"


class DeleteFailedError(AppError):
    """The record disappeared between the existence check and the delete."""

    status_code = 500
    code = "DELETE_FAILED"
