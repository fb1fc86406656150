from __future__ import annotations

"""Value objects shared by the overlay, loading, and refresh view models."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

CategoryKey = str
OverlayId = str
Identifier = str

SCOPE_GLOBAL = "global"
SCOPE_CATEGORY = "category"
SCOPE_WORKFLOW = "workflow"
GLOBAL_SCOPE_KEY = "GLOBAL"


@dataclass(frozen=True)
class RecordRef:
    """Reference to a sacramental record shown in a list row or overlay."""

    id: Identifier
    """Backend identifier of the record."""
    category: Optional[CategoryKey] = None
    """Category key the record belongs to, when known."""
    member_id: Optional[Identifier] = None
    """Identifier of the member the record was issued for."""
    label: Optional[str] = None
    """Human readable caption used by detail and certificate overlays."""

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("RecordRef.id must be a non-empty string.")

    def __str__(self) -> str:
        return self.id

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], *, category: Optional[CategoryKey] = None
    ) -> "RecordRef":
        """Build a reference from a GraphQL row such as ``{"id": ..., "memberId": ...}``."""
        if not isinstance(payload, Mapping):
            raise ValueError("Record payload must be a mapping.")
        raw_id = payload.get("id")
        if raw_id is None:
            raise ValueError("Record payload is missing 'id'.")
        member = payload.get("memberId") or payload.get("member_id")
        kind = payload.get("sacramentType") or payload.get("category") or category
        label = payload.get("label") or payload.get("officiantName")
        return cls(
            id=str(raw_id),
            category=str(kind) if kind else None,
            member_id=str(member) if member else None,
            label=str(label) if label else None,
        )


@dataclass(frozen=True)
class FocusContext:
    """Record and identifier the detail/edit/certificate/history overlays operate on."""

    selected_record: Optional[RecordRef] = None
    """Record owned jointly by the record-focus overlays."""
    selected_entity_id: Optional[Identifier] = None
    """Identifier owned by the cross-entity history overlay."""


@dataclass(frozen=True)
class Scope:
    """Granularity at which a loading flag is tracked."""

    kind: str
    """One of ``global``, ``category`` or ``workflow``."""
    name: str = GLOBAL_SCOPE_KEY
    """Category key or workflow name; ``GLOBAL`` for the global scope."""

    def __post_init__(self) -> None:
        if self.kind not in (SCOPE_GLOBAL, SCOPE_CATEGORY, SCOPE_WORKFLOW):
            raise ValueError(f"Unknown scope kind: {self.kind!r}")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Scope name must be a non-empty string.")

    @classmethod
    def global_(cls) -> "Scope":
        return cls(SCOPE_GLOBAL, GLOBAL_SCOPE_KEY)

    @classmethod
    def category(cls, key: CategoryKey) -> "Scope":
        return cls(SCOPE_CATEGORY, key)

    @classmethod
    def workflow(cls, name: str) -> "Scope":
        return cls(SCOPE_WORKFLOW, name)

    @property
    def key(self) -> str:
        """Stable string form, e.g. ``GLOBAL`` or ``category:BAPTISM``."""
        if self.kind == SCOPE_GLOBAL:
            return GLOBAL_SCOPE_KEY
        return f"{self.kind}:{self.name}"

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class OperationKey:
    """Active operation as reported by the loading tracker."""

    scope: Scope
    label: Optional[str] = None

    def describe(self) -> str:
        if self.label:
            return f"{self.scope.key} {self.label}"
        return self.scope.key


@dataclass(frozen=True)
class LoadingState:
    """Busy/idle snapshot for a single scope.

    ``count`` is the number of in-flight operations; ``busy`` is derived from
    it so overlapping operations keep the scope busy until all of them settle.
    ``label`` and ``record_id`` describe the most recently started operation.
    """

    count: int = 0
    label: Optional[str] = None
    record_id: Optional[Identifier] = None
    labels: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def busy(self) -> bool:
        return self.count > 0


__all__ = [
    "CategoryKey",
    "FocusContext",
    "GLOBAL_SCOPE_KEY",
    "Identifier",
    "LoadingState",
    "OperationKey",
    "OverlayId",
    "RecordRef",
    "SCOPE_CATEGORY",
    "SCOPE_GLOBAL",
    "SCOPE_WORKFLOW",
    "Scope",
]
