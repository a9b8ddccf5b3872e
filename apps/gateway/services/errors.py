from __future__ import annotations

from typing import Any


UPSTREAM_NAME = "Mulesoft API"


class GatewayError(Exception):
    """Base for every failure the page pipeline can end in.

    Each subclass knows the HTTP status and JSON body the caller receives.
    """

    status_code: int = 500
    error: str = "Failed to generate Confluence page"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, Any]:
        return {"status": "error", "error": self.error, "message": self.message}


class ValidationError(GatewayError):
    """Client-caused: missing required field or disallowed upload field."""

    status_code = 400

    def __init__(self, message: str, debug: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.debug = debug

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"status": "error", "message": self.message}
        if self.debug is not None:
            body["debug"] = self.debug
        return body


class PayloadTooLargeError(ValidationError):
    """Non-multipart body over the configured size limit."""

    status_code = 413

    def __init__(self, limit: int) -> None:
        super().__init__(f"Request body exceeds {limit} bytes")
        self.limit = limit


class StorageError(GatewayError):
    """Local storage failed while staging an upload."""

    error = "Failed to store uploaded file"


class UpstreamError(GatewayError):
    """Upstream answered with a non-success status."""

    error = f"{UPSTREAM_NAME} error"

    def __init__(self, status_code: int, details: Any) -> None:
        super().__init__(f"Request failed with status code {status_code}")
        self.status_code = status_code
        self.details = details

    def to_body(self) -> dict[str, Any]:
        return {"status": "error", "error": self.error, "details": self.details, "message": self.message}


class NetworkError(GatewayError):
    """No response from upstream: connection failure or timeout."""

    error = f"No response from {UPSTREAM_NAME}"

    def __init__(self, message: str = "Network or timeout error") -> None:
        super().__init__(message)


class RequestSetupError(GatewayError):
    """Anything else that went wrong building or sending the upstream call."""


class CleanupError(GatewayError):
    """A staged file could not be deleted. Logged, never returned to the caller."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"could not delete {path}: {reason}")
        self.path = path
