"""
Shared error handling for the Market Signal Proxy.

Every failure a route can produce is one of the ``ProxyError`` subclasses
below. The service shell renders them as ``{"error": message}`` with the
carried ``status_code``.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str


class ProxyError(Exception):
    """Base exception for proxy failures."""

    status_code: int = 500

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(error=self.message)


class ValidationError(ProxyError):
    """Client supplied missing, malformed or out-of-range input."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, 400, details)


class ConfigurationError(ProxyError):
    """A server-held secret or setting is absent."""

    def __init__(self, message: str = "Service is not configured", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, 500, details)


class UpstreamStatusError(ProxyError):
    """Upstream answered with a non-success status; the status is relayed."""

    def __init__(self, service: str, status_code: int, detail: Optional[str] = None):
        message = f"{service} API returned status {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            "UPSTREAM_STATUS_ERROR",
            message,
            status_code,
            {"service": service, "status_code": status_code},
        )


class TransportError(ProxyError):
    """Upstream call could not complete (DNS, connection, timeout, bad payload)."""

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, 500, {"service": service, **(details or {})})


class EmptyResultError(ProxyError):
    """Completion upstream succeeded without usable content."""

    def __init__(self, message: str = "Empty response from OpenAI API"):
        super().__init__("EMPTY_RESULT_ERROR", message, 500)


class ThrottleError(ProxyError):
    """The throttle gate failed while the caller was waiting for its turn."""

    def __init__(self, message: str = "Request throttling failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("THROTTLE_ERROR", message, 500, details)
