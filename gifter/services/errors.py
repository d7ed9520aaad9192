"""Service-layer exceptions.

Routers never build error responses for these by hand; the handlers in
gifter.core.exceptions map each class to a status code.
"""


class GifterServiceError(Exception):
    """Base exception for service errors."""

    code = "GIFTER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GifterServiceError):
    """Malformed or empty input, mismatched id sets, missing alternatives."""

    code = "VALIDATION_ERROR"


class NotFoundOrForbidden(GifterServiceError):
    """Target is absent or belongs to another user.

    Both cases share one message so callers cannot discover other users' ids.
    """

    code = "NOT_FOUND"

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class ConflictError(GifterServiceError):
    """Unique value already taken (registration email)."""

    code = "CONFLICT"


class StoreError(GifterServiceError):
    """Underlying persistence failure."""

    code = "STORE_ERROR"
