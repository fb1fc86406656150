from __future__ import annotations

import pytest

from sacra.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    GraphQLError,
)
from sacra.domain.errors import UseCaseError
from sacra.usecases.error_mapping import map_api_error


@pytest.mark.parametrize(
    "exc, code",
    [
        (ApiTimeoutError("t"), "REQUEST_TIMEOUT"),
        (ApiClientError("c", status=401), "AUTH_FAILED"),
        (ApiClientError("c", status=404, payload={"message": "missing"}), "REQUEST_FAILED"),
        (ApiServerError("s", status=500), "SERVER_ERROR"),
        (ApiError("generic"), "API_ERROR"),
        (RuntimeError("boom"), "DELETE_FAILED"),
    ],
)
def test_map_api_error_codes(exc: Exception, code: str) -> None:
    assert map_api_error(exc, default_code="DELETE_FAILED").code == code


def test_graphql_auth_errors_map_to_auth_failed() -> None:
    exc = GraphQLError("g", errors=[{"message": "x", "extensions": {"code": "UNAUTHENTICATED"}}])

    assert map_api_error(exc, default_code="X").code == "AUTH_FAILED"


def test_graphql_errors_carry_hint_and_code() -> None:
    exc = GraphQLError(
        "g", errors=[{"message": "Date in future", "extensions": {"code": "BAD_USER_INPUT"}}]
    )

    mapped = map_api_error(exc, default_code="X")

    assert mapped.code == "GRAPHQL_ERROR"
    assert mapped.message == "Request rejected: Date in future"
    assert mapped.meta == {"code": "BAD_USER_INPUT"}


def test_client_error_message_includes_hint() -> None:
    exc = ApiClientError("c", status=404, payload={"message": "missing"})

    assert map_api_error(exc, default_code="X").message == "Request failed (HTTP 404): missing"


def test_use_case_errors_pass_through() -> None:
    original = UseCaseError("CUSTOM", "keep me")

    assert map_api_error(original, default_code="X") is original
