from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from sacra.domain.entities import CategoryKey, Identifier, RecordRef
from sacra.domain.ports import RecordMutations, RecordSource


@dataclass
class RecordsMock(RecordSource, RecordMutations):
    """Offline substitute for ``GraphQLRecordsAdapter`` with deterministic rows."""

    seed: Dict[CategoryKey, List[RecordRef]] = field(default_factory=dict)
    failures: Dict[CategoryKey, Exception] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._rows: Dict[CategoryKey, List[RecordRef]] = {
            key: list(rows) for key, rows in self.seed.items()
        }
        self.fetch_calls: List[CategoryKey] = []

    @classmethod
    def with_rows(cls, categories: Iterable[CategoryKey], per_category: int = 2) -> "RecordsMock":
        seed = {
            key: [
                RecordRef(id=f"{key.lower()}-{idx}", category=key, member_id=f"member-{idx}")
                for idx in range(1, per_category + 1)
            ]
            for key in categories
        }
        return cls(seed=seed)

    # ---------- RecordSource ----------

    def fetch_records(
        self, category: CategoryKey, variables: Optional[Dict[str, Any]] = None
    ) -> List[RecordRef]:
        self.fetch_calls.append(category)
        failure = self.failures.get(category)
        if failure is not None:
            raise failure
        return list(self._rows.get(category, []))

    # ---------- RecordMutations ----------

    def create_record(self, category: CategoryKey, member_id: Optional[str] = None) -> RecordRef:
        record = RecordRef(id=f"{category.lower()}-{uuid4().hex[:8]}", category=category, member_id=member_id)
        self._rows.setdefault(category, []).append(record)
        return record

    def delete_record(self, record_id: Identifier) -> bool:
        for rows in self._rows.values():
            for record in list(rows):
                if record.id == record_id:
                    rows.remove(record)
                    return True
        return False


__all__ = ["RecordsMock"]
