"""
Error types shared by the Jobly data-access layer.

Each error carries the HTTP-style status the calling layer should map it to,
so routing code can translate failures without inspecting messages.
"""


class JoblyError(Exception):
    """Base class for expected, caller-facing errors."""

    status = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """Raised when caller input is invalid (maps to 400)."""

    status = 400

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class NotFoundError(JoblyError):
    """Raised when a statement affected or returned zero rows (maps to 404)."""

    status = 404

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)


class EmptyInputError(BadRequestError):
    """Raised when a partial update payload has no fields."""

    def __init__(self, message: str = "No data"):
        super().__init__(message)


__all__ = ["JoblyError", "BadRequestError", "NotFoundError", "EmptyInputError"]
