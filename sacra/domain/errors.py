"""Domain-level error types shared by view models, controllers, and use cases.

Caller errors flag programming defects (an identifier outside the configured
catalog) and are raised at the call site. ``UseCaseError`` carries a stable
code for user-presentable failures mapped from adapter exceptions.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional


class CallerError(ValueError):
    """Raised when a caller passes an identifier outside the configured catalog."""

    kind = "identifier"

    def __init__(self, value: Any, allowed: Iterable[str] = ()) -> None:
        self.value = value
        self.allowed = tuple(allowed)
        message = f"Unknown {self.kind}: {value!r}"
        if self.allowed:
            message = f"{message} (expected one of: {', '.join(self.allowed)})"
        super().__init__(message)


class UnknownCategoryError(CallerError):
    kind = "category"


class UnknownScopeError(CallerError):
    kind = "loading scope"


class UnknownOverlayError(CallerError):
    kind = "overlay"


class CatalogError(ValueError):
    """Raised when a screen catalog is internally inconsistent."""


class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta or {}


__all__ = [
    "CallerError",
    "CatalogError",
    "UnknownCategoryError",
    "UnknownOverlayError",
    "UnknownScopeError",
    "UseCaseError",
]
