"""Error types raised along the generate pipeline.

Each error carries the HTTP status the dispatcher answers with.
"""
from __future__ import annotations


class CoupletError(Exception):
    """Base error with an HTTP status code."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(CoupletError):
    """Required configuration (e.g. the API key) is missing or malformed."""

    status_code = 500


class UpstreamError(CoupletError):
    """The completion API could not be reached, or replied with something unusable."""

    status_code = 502

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class ValidationError(CoupletError):
    """The model replied with JSON that is not a complete couplet."""

    status_code = 502


class MethodNotAllowed(CoupletError):
    status_code = 405

    def __init__(self, message: str = "Method Not Allowed") -> None:
        super().__init__(message)
