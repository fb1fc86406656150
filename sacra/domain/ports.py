from __future__ import annotations
from typing import Any, Dict, List, Optional, Protocol

from .entities import CategoryKey, Identifier, RecordRef


# ---- Ports (Hexagonal boundaries) ----
class RecordSource(Protocol):
    """Query side of a category's record list (GraphQL, REST, or a cache)."""

    def fetch_records(
        self, category: CategoryKey, variables: Optional[Dict[str, Any]] = None
    ) -> List[RecordRef]: ...


class RecordMutations(Protocol):
    """Mutations performed by the screen's create/edit/delete workflows."""

    def delete_record(self, record_id: Identifier) -> bool: ...
