"""HTTP exceptions for the public API.

Every failure response carries a flat JSON body of the form
``{"message": ..., "error": ...}`` instead of FastAPI's ``{"detail": ...}``.
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse


class ApiError(HTTPException):
    """Base exception for API failures rendered as ``{message, error}``."""

    def __init__(
        self,
        status_code: int,
        message: str,
        error: str | None = None,
    ) -> None:
        self.message = message
        self.error = error
        super().__init__(status_code=status_code, detail=message)

    def to_body(self) -> dict[str, str]:
        """Build the JSON response body."""
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class NotFoundError(ApiError):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, message=message)


class InternalServerError(ApiError):
    """Raised when an operation fails; carries the underlying error detail."""

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=message,
            error=error or "Unknown error",
        )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render ApiError as a flat JSON body."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach API exception handlers to the application."""
    app.add_exception_handler(ApiError, api_error_handler)
