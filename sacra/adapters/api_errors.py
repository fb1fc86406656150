from __future__ import annotations

from typing import Any, List, Optional


class ApiError(RuntimeError):
    """Base class for records API failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the GraphQL endpoint."""


class ApiServerError(ApiError):
    """HTTP 5xx from the GraphQL endpoint."""


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


class GraphQLError(ApiError):
    """HTTP 200 response whose body carries a GraphQL ``errors`` array."""

    def __init__(
        self,
        message: str,
        *,
        errors: List[Any],
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=200,
            code=extract_error_code(errors),
            payload=errors,
            context=context,
        )
        self.errors = errors


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of error payload without raising."""
    try:
        return resp.json()
    except ValueError:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = first_message(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def extract_error_code(payload: Any) -> Optional[str]:
    """Return ``extensions.code`` of the first GraphQL error, or a top-level ``code``."""
    if isinstance(payload, dict):
        if isinstance(payload.get("errors"), list):
            return extract_error_code(payload["errors"])
        extensions = payload.get("extensions")
        if isinstance(extensions, dict) and extensions.get("code"):
            return str(extensions["code"])
        if payload.get("code"):
            return str(payload["code"])
    if isinstance(payload, list):
        for item in payload:
            code = extract_error_code(item)
            if code:
                return code
    return None


def first_message(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        text = payload.strip()
        return text or None
    if isinstance(payload, dict):
        for key in ("message", "detail", "error", "errors"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, (list, dict)):
                candidate = first_message(value)
                if candidate:
                    return candidate
    if isinstance(payload, list):
        for item in payload:
            candidate = first_message(item)
            if candidate:
                return candidate
    return None


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "GraphQLError",
    "build_error_message",
    "extract_error_code",
    "first_message",
    "parse_error_payload",
]
