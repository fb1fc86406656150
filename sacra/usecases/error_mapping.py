"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations


from typing import Optional

from sacra.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    GraphQLError,
    first_message,
)
from sacra.domain.errors import UseCaseError


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    The screen controller re-raises workflow failures unchanged; callers that
    present errors to users pass them through here first.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Request timed out. Check connection.")
    if isinstance(exc, GraphQLError):
        if exc.code in ("UNAUTHENTICATED", "FORBIDDEN"):
            return UseCaseError("AUTH_FAILED", "Session expired or access denied.")
        hint = first_message(exc.errors)
        return UseCaseError(
            "GRAPHQL_ERROR",
            _compose_error_message("Request rejected", hint),
            meta={"code": exc.code} if exc.code else None,
        )
    if isinstance(exc, ApiClientError):
        status = exc.status or 0
        if status in (401, 403):
            return UseCaseError("AUTH_FAILED", "Session expired or access denied.")
        hint = first_message(exc.payload)
        label = f"Request failed (HTTP {status})" if status else "Request failed"
        return UseCaseError("REQUEST_FAILED", _compose_error_message(label, hint))
    if isinstance(exc, ApiServerError):
        return UseCaseError("SERVER_ERROR", "Server error, try again.")
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", str(exc))

    message = default_message or str(exc) or "Unexpected error."
    return UseCaseError(default_code, message)


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if not hint_text:
        return base
    return f"{base}: {hint_text}"


__all__ = ["map_api_error"]
