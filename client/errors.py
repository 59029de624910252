"""Uniform error mapping for backend calls."""

from __future__ import annotations

from typing import Optional


class ApiError(Exception):
    """A backend call failed. ``status_code`` is None for transport failures."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, path: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class TransportError(ApiError):
    """Connection refused, DNS failure, timeout."""


class UnauthorizedError(ApiError):
    """HTTP 401: the bearer token is missing, expired, or revoked."""


class ResponseFormatError(ApiError):
    """The body was not JSON, or did not match the expected record shape."""
