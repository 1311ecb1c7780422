"""Error types shared by the backend clients and the storefront pages."""

from __future__ import annotations

from typing import Optional


class StorefrontError(Exception):
    """Base class for every error raised by the storefront layer."""


class TransportError(StorefrontError):
    """The request itself failed: unreachable host, timeout or a non-JSON body."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause

