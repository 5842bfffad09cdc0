"""Typed failures raised by the query task client."""
from typing import Optional


class LinkLiteError(Exception):
    """Base exception for LinkLite errors."""

    pass


class ConfigurationError(LinkLiteError):
    """Raised when required connector settings are missing or invalid."""

    pass


class RemoteRequestError(LinkLiteError):
    """The remote service answered with a non-2xx status code."""

    def __init__(self, endpoint: str, status_code: int):
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(f"{endpoint} Request failed: {status_code}")


class ResponseFormatError(LinkLiteError):
    """A 2xx response body could not be read as the expected payload.

    The raw body is kept on the error so it survives past the client.
    """

    def __init__(self, endpoint: str, body: str, cause: Exception | None = None):
        self.endpoint = endpoint
        self.body = body
        self.cause = cause
        super().__init__(f"Invalid Response Format from {endpoint}")


class RemoteLogicalFailureError(LinkLiteError):
    """The request was accepted but the payload status reports failure."""

    def __init__(self, endpoint: str, status: Optional[str], body: str):
        self.endpoint = endpoint
        self.status = status
        self.body = body
        super().__init__(f"Unsuccessful Response from {endpoint}: status={status!r}")
