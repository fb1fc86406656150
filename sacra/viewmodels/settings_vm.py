from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional

from ..utils.logging import env_debug_forced

_ENV_PREFIX = "SACRA_"


@dataclass(frozen=True)
class ScreenSettings:
    """Typed runtime settings for the screen controller and its data sources."""

    graphql_url: str = ""
    api_token: str = ""
    request_timeout_s: int = 10
    retries: int = 2
    debug_logging: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScreenSettings":
        """Build settings from ``SACRA_*`` environment variables."""
        env = os.environ if environ is None else environ
        payload: Dict[str, Any] = {
            "graphql_url": env.get(f"{_ENV_PREFIX}GRAPHQL_URL", ""),
            "api_token": env.get(f"{_ENV_PREFIX}API_TOKEN", ""),
            "debug_logging": env_debug_forced(env),
        }
        if env.get(f"{_ENV_PREFIX}REQUEST_TIMEOUT_S"):
            payload["request_timeout_s"] = env[f"{_ENV_PREFIX}REQUEST_TIMEOUT_S"]
        if env.get(f"{_ENV_PREFIX}RETRIES"):
            payload["retries"] = env[f"{_ENV_PREFIX}RETRIES"]
        return cls.from_dict(payload)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ScreenSettings":
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping.")
        base = cls()
        return base.apply(payload)

    def apply(self, payload: Mapping[str, Any]) -> "ScreenSettings":
        """Return a copy with the known keys of ``payload`` coerced and applied."""
        updates: Dict[str, Any] = {}
        if "graphql_url" in payload:
            updates["graphql_url"] = _coerce_url(payload.get("graphql_url"))
        if "api_token" in payload:
            updates["api_token"] = str(payload.get("api_token") or "").strip()
        if "request_timeout_s" in payload:
            updates["request_timeout_s"] = _coerce_int(
                "request_timeout_s", payload.get("request_timeout_s"), minimum=1
            )
        if "retries" in payload:
            updates["retries"] = _coerce_int("retries", payload.get("retries"), minimum=0)
        if "debug_logging" in payload:
            updates["debug_logging"] = _coerce_bool(payload.get("debug_logging"))
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def has_endpoint(self) -> bool:
        return bool(self.graphql_url)


def _coerce_url(value: Any) -> str:
    text = str(value or "").strip()
    if text and not text.startswith(("http://", "https://")):
        raise ValueError(f"graphql_url must be an http(s) URL, got {text!r}")
    return text


def _coerce_int(name: str, value: Any, *, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if number < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {number}")
    return number


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


__all__ = ["ScreenSettings"]
