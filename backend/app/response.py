from fastapi import HTTPException
from fastapi.responses import JSONResponse


class ErrorResponse:
    """Body of every error the API returns."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        track_id: str | None = None,
        errors: dict | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.track_id = track_id
        self.errors = errors

    def to_dict(self):
        return {
            "message": self.message,
            "errors": self.errors,
            "error_code": self.error_code,
            "track_id": self.track_id,
        }

    def get_response(self, status, headers: dict | None = None):
        return JSONResponse(content=self.to_dict(), status_code=status, headers=headers)

    def __str__(self):
        return self.message

    def __repr__(self):
        return f"<{type(self).__name__} {self.error_code or ''} {self.message!r}>"


class CustomHTTPException(HTTPException, ErrorResponse):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str | None = None,
        track_id: str | None = None,
        errors: dict | None = None,
        headers: dict | None = None,
    ):
        ErrorResponse.__init__(self, message, error_code, track_id, errors)
        super().__init__(status_code=status_code, detail=message, headers=headers)


class _StatusError(CustomHTTPException):
    status = 400
    default_message = "Bad request"
    default_code: str | None = None

    def __init__(self, message: str | None = None, error_code: str | None = None):
        super().__init__(
            self.status,
            message or self.default_message,
            error_code=error_code or self.default_code,
        )


class NotFoundError(_StatusError):
    status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ForbiddenError(_StatusError):
    status = 403
    default_message = "You don't have permission to perform this action."
    default_code = "FORBIDDEN"


class ConflictError(_StatusError):
    """A request that clashes with the current state, e.g. a full event."""

    status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"
