"""Custom exceptions and exception handlers."""

from fastapi import Request, status
from fastapi.responses import JSONResponse


class FieldFillError(Exception):
    """Base exception for fieldfill."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AddressingError(FieldFillError):
    """Path that cannot address the record.

    Malformed syntax is never an error (the segment is read as a literal key).
    Raised when a list root is addressed with a property name.
    """

    def __init__(self, path: str):
        super().__init__(f"Cannot address path '{path}'", status_code=status.HTTP_400_BAD_REQUEST)


class ConfigurationError(FieldFillError):
    """Invalid override or missing credential. Not retried."""

    def __init__(self, message: str):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class ExtractionError(FieldFillError):
    """Extraction failure. Not raised for well-formed JSON-like input."""

    def __init__(self, message: str):
        super().__init__(message, status_code=422)


class GenerationError(FieldFillError):
    """The generation provider failed on every attempt."""

    def __init__(self, message: str, attempts: int = 0):
        self.attempts = attempts
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY)


class CacheError(FieldFillError):
    """Cache storage unavailable. Logged and swallowed by the cache."""

    def __init__(self, message: str):
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def field_fill_exception_handler(request: Request, exc: FieldFillError) -> JSONResponse:
    """Handle FieldFillError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "type": type(exc).__name__},
    )
