"""Shared HTTP transport for the GraphQL records adapter.

This module provides a thin wrapper around ``requests.Session`` so adapter
implementations share timeout policy, a simple retry count, and bearer-token
header construction. Backoff and richer retry policy belong to the data
layer, not to this package.

Dependencies:
    - ``requests`` for network I/O.
    - ``sacra.adapters.api_errors.ApiTimeoutError`` for typed transport failures.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from sacra.adapters.api_errors import ApiTimeoutError


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Default timeout in seconds for GraphQL calls.
        retries: Number of retry attempts after the initial request.
    """
    request_timeout_s: int = 10
    retries: int = 2


class RetryingSession:
    """Shared requests wrapper with bearer-token headers and a retry loop.

    Transport-only: callers decide how to map non-2xx responses and GraphQL
    error payloads into typed errors.
    """

    def __init__(self, api_token: Optional[str], cfg: HttpConfig) -> None:
        self.session = requests.Session()
        self.api_token = api_token
        self.cfg = cfg

    def _headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def post(
        self,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a JSON POST request with retries on transport failures.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
        """
        context = f"POST {url}"
        data = None if json_body is None else json.dumps(json_body)
        last_err: ApiTimeoutError | None = None
        attempts = self.cfg.retries + 1
        for _ in range(attempts):
            try:
                return self.session.post(
                    url,
                    data=data,
                    headers=self._headers(json_body=json_body is not None),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError):
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
        raise last_err


__all__ = ["HttpConfig", "RetryingSession"]
