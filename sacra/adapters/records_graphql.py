"""GraphQL implementation of the record source and mutation ports.

Each category list runs the same filtered ``sacramentalRecords`` query with
its own ``sacramentType``; the list controller wraps ``fetch_records`` into
the refetch callable it registers with the refresh registry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sacra.domain.entities import CategoryKey, Identifier, RecordRef
from sacra.domain.ports import RecordMutations, RecordSource

from .api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    GraphQLError,
    build_error_message,
    first_message,
    parse_error_payload,
)
from .http_client import HttpConfig, RetryingSession

RECORDS_QUERY = """
query SacramentalRecords($filter: SacramentalRecordFilterInput) {
  sacramentalRecords(filter: $filter) {
    id
    memberId
    sacramentType
    dateOfSacrament
    officiantName
    locationOfSacrament
    certificateUrl
  }
}
""".strip()

DELETE_MUTATION = """
mutation DeleteSacramentalRecord($id: ID!) {
  deleteSacramentalRecord(id: $id)
}
""".strip()


class GraphQLRecordsAdapter(RecordSource, RecordMutations):
    """Run record queries and mutations against a GraphQL endpoint."""

    def __init__(
        self,
        url: str,
        *,
        api_token: Optional[str] = None,
        request_timeout_s: int = 10,
        retries: int = 2,
        base_filter: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not url:
            raise ValueError("GraphQL endpoint URL is required.")
        self.url = url
        self.base_filter = dict(base_filter or {})
        self._log = logging.getLogger(__name__)
        self.session = RetryingSession(
            api_token, HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        )

    # ---------- RecordSource ----------

    def fetch_records(
        self, category: CategoryKey, variables: Optional[Dict[str, Any]] = None
    ) -> List[RecordRef]:
        record_filter = dict(self.base_filter)
        record_filter.update(variables or {})
        record_filter["sacramentType"] = category
        data = self._execute(RECORDS_QUERY, {"filter": record_filter}, ctx=f"records {category}")
        rows = data.get("sacramentalRecords") or []
        if not isinstance(rows, list):
            raise ApiError(
                f"records {category}: unexpected payload", payload=rows, context=self.url
            )
        records = [RecordRef.from_payload(row, category=category) for row in rows]
        self._log.debug("Fetched %d %s records", len(records), category)
        return records

    # ---------- RecordMutations ----------

    def delete_record(self, record_id: Identifier) -> bool:
        data = self._execute(DELETE_MUTATION, {"id": record_id}, ctx=f"delete {record_id}")
        return bool(data.get("deleteSacramentalRecord"))

    # ---------- helpers ----------

    def _execute(self, query: str, variables: Dict[str, Any], *, ctx: str) -> Dict[str, Any]:
        resp = self.session.post(self.url, json_body={"query": query, "variables": variables})
        status = resp.status_code
        if status >= 500:
            payload = parse_error_payload(resp)
            raise ApiServerError(
                build_error_message(ctx, status, payload),
                status=status,
                payload=payload,
                context=ctx,
            )
        if status >= 400:
            payload = parse_error_payload(resp)
            raise ApiClientError(
                build_error_message(ctx, status, payload),
                status=status,
                payload=payload,
                context=ctx,
            )
        body = resp.json()
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            message = first_message(errors) or "GraphQL error"
            raise GraphQLError(f"{ctx}: {message}", errors=list(errors), context=ctx)
        data = body.get("data") if isinstance(body, dict) else None
        return data or {}


__all__ = ["DELETE_MUTATION", "GraphQLRecordsAdapter", "RECORDS_QUERY"]
