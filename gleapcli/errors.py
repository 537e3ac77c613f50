"""Error types reported by the tool, each with its own process exit code."""

from __future__ import annotations


class AppError(Exception):
    """Base class for every error the tool reports."""

    prefix = "Error"
    code = 1

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"

    def exit_code(self) -> int:
        """Process exit code that corresponds to this error."""
        return self.code


class AuthError(AppError):
    """The API rejected the credentials (HTTP 401 or 403)."""

    prefix = "Authentication failed"
    code = 2


class ApiError(AppError):
    """A generic API failure."""

    prefix = "API error"
    code = 3


class ApiStatusError(AppError):
    """The API answered with an unexpected non-success status."""

    code = 3

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        return f"API error ({self.status}): {self.message}"


class ConfigError(AppError):
    """Missing or invalid configuration or credentials."""

    prefix = "Configuration error"
    code = 4


class NotFoundError(AppError):
    """The requested resource does not exist (HTTP 404)."""

    prefix = "Not found"
    code = 5


class RateLimitedError(AppError):
    """The API is throttling requests (HTTP 429)."""

    code = 6

    def __init__(self, retry_after_secs: int = 60) -> None:
        super().__init__(f"retry after {retry_after_secs}s")
        self.retry_after_secs = retry_after_secs

    def __str__(self) -> str:
        return f"Rate limited: retry after {self.retry_after_secs}s"


class HttpError(AppError):
    """A transport-level failure while talking to the API."""

    prefix = "HTTP error"
    code = 7


class IoError(AppError):
    """A local input/output failure."""

    prefix = "IO error"
    code = 8


class SerializationError(AppError):
    """JSON could not be encoded or decoded into the expected shape."""

    prefix = "Serialization error"
    code = 9