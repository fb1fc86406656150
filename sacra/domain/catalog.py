"""Fixed category and overlay enumerations supplied to the screen controller.

The modal coordinator, loading tracker, and refresh registry are generic over
a :class:`ScreenCatalog`; only :meth:`ScreenCatalog.default` knows the
sacrament categories managed by the dashboard screen.
"""

from __future__ import annotations


from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from .entities import GLOBAL_SCOPE_KEY, CategoryKey, OverlayId
from .errors import CatalogError, UnknownCategoryError, UnknownOverlayError

DETAIL: OverlayId = "DETAIL"
EDIT: OverlayId = "EDIT"
CERTIFICATE: OverlayId = "CERTIFICATE"
ANALYTICS: OverlayId = "ANALYTICS"
ENTITY_HISTORY: OverlayId = "ENTITY_HISTORY"
DELETE_CONFIRM: OverlayId = "DELETE_CONFIRM"
EXPORT: OverlayId = "EXPORT"

RECORD_FOCUS_OVERLAYS: Tuple[OverlayId, ...] = (DETAIL, EDIT, CERTIFICATE)
AUXILIARY_OVERLAYS: Tuple[OverlayId, ...] = (ANALYTICS, ENTITY_HISTORY, DELETE_CONFIRM, EXPORT)
WORKFLOWS: Tuple[str, ...] = ("create", "edit", "delete", "certificate", "export")

SACRAMENT_LABELS: Dict[CategoryKey, str] = {
    "BAPTISM": "Baptism",
    "EUCHARIST_FIRST_COMMUNION": "First Communion",
    "CONFIRMATION": "Confirmation",
    "MATRIMONY": "Marriage",
    "RECONCILIATION_FIRST": "First Reconciliation",
    "ANOINTING_OF_THE_SICK": "Anointing of the Sick",
    "HOLY_ORDERS_DIACONATE": "Diaconate Ordination",
    "HOLY_ORDERS_PRIESTHOOD": "Priesthood Ordination",
    "RCIA_INITIATION": "RCIA Initiation",
}


@dataclass(frozen=True)
class ScreenCatalog:
    """Closed enumerations of categories, overlays, and workflow scopes."""

    categories: Tuple[CategoryKey, ...]
    record_focus_overlays: Tuple[OverlayId, ...] = RECORD_FOCUS_OVERLAYS
    entity_focus_overlay: Optional[OverlayId] = ENTITY_HISTORY
    auxiliary_overlays: Tuple[OverlayId, ...] = AUXILIARY_OVERLAYS
    workflows: Tuple[str, ...] = WORKFLOWS
    labels: Mapping[CategoryKey, str] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", tuple(self.categories))
        object.__setattr__(self, "record_focus_overlays", tuple(self.record_focus_overlays))
        object.__setattr__(self, "auxiliary_overlays", tuple(self.auxiliary_overlays))
        object.__setattr__(self, "workflows", tuple(self.workflows))
        self.validate()

    @classmethod
    def default(cls) -> "ScreenCatalog":
        """Build the catalog of the sacraments management screen."""
        return cls(categories=tuple(SACRAMENT_LABELS), labels=dict(SACRAMENT_LABELS))

    @classmethod
    def for_categories(cls, categories: Iterable[CategoryKey], **kwargs) -> "ScreenCatalog":
        return cls(categories=tuple(categories), **kwargs)

    # ------------------------------------------------------------------
    def validate(self) -> None:
        """Reject empty, duplicated, or colliding identifiers.

        A category may not reuse the global scope key, a workflow name, or the
        ``:`` separator of prefixed scope keys.
        """
        if not self.categories:
            raise CatalogError("Catalog requires at least one category.")
        for name, values in (
            ("categories", self.categories),
            ("overlays", self.overlays),
            ("workflows", self.workflows),
        ):
            blank = [value for value in values if not isinstance(value, str) or not value.strip()]
            if blank:
                raise CatalogError(f"Catalog {name} must be non-empty strings.")
            duplicates = sorted(value for value, count in Counter(values).items() if count > 1)
            if duplicates:
                raise CatalogError(f"Duplicate {name}: {', '.join(duplicates)}")
        reserved = sorted(
            key
            for key in self.categories
            if key.upper() == GLOBAL_SCOPE_KEY or key in self.workflows or ":" in key
        )
        if reserved:
            # Bare category keys double as loading scope names.
            raise CatalogError(f"Categories collide with scope names: {', '.join(reserved)}")
        if (
            self.entity_focus_overlay is not None
            and self.entity_focus_overlay not in self.auxiliary_overlays
        ):
            raise CatalogError(
                f"Entity focus overlay {self.entity_focus_overlay!r} must be an auxiliary overlay."
            )

    @property
    def overlays(self) -> Tuple[OverlayId, ...]:
        """Every overlay id: one create overlay per category, then the shared ones."""
        return self.categories + self.record_focus_overlays + self.auxiliary_overlays

    @property
    def overlay_set(self) -> FrozenSet[OverlayId]:
        return frozenset(self.overlays)

    def has_category(self, key: CategoryKey) -> bool:
        return key in self.categories

    def require_category(self, key: CategoryKey) -> CategoryKey:
        if key not in self.categories:
            raise UnknownCategoryError(key, self.categories)
        return key

    def require_overlay(self, overlay: OverlayId) -> OverlayId:
        if overlay not in self.overlay_set:
            raise UnknownOverlayError(overlay, self.overlays)
        return overlay

    def label_for(self, key: CategoryKey) -> str:
        self.require_category(key)
        return self.labels.get(key) or key.replace("_", " ").title()


__all__ = [
    "ANALYTICS",
    "AUXILIARY_OVERLAYS",
    "CERTIFICATE",
    "DELETE_CONFIRM",
    "DETAIL",
    "EDIT",
    "ENTITY_HISTORY",
    "EXPORT",
    "RECORD_FOCUS_OVERLAYS",
    "SACRAMENT_LABELS",
    "ScreenCatalog",
    "WORKFLOWS",
]
