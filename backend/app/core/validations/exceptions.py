from app.response import CustomHTTPException


class FieldValidationError(CustomHTTPException):
    """Field-scoped validation failure, e.g. ``FieldValidationError(end_at="...")``."""

    def __init__(self, message="Invalid Request", **errors):
        super().__init__(
            status_code=400,
            message=message,
            error_code="VALIDATION_ERROR",
            track_id=None,
            errors=errors,
        )
