"""Domain package exports for value objects, the screen catalog, and errors."""

from .catalog import (
    CERTIFICATE,
    DETAIL,
    EDIT,
    ENTITY_HISTORY,
    ScreenCatalog,
)
from .entities import (
    CategoryKey,
    FocusContext,
    Identifier,
    LoadingState,
    OperationKey,
    OverlayId,
    RecordRef,
    Scope,
)
from .errors import (
    CallerError,
    CatalogError,
    UnknownCategoryError,
    UnknownOverlayError,
    UnknownScopeError,
    UseCaseError,
)

__all__ = [
    "CERTIFICATE",
    "CallerError",
    "CatalogError",
    "CategoryKey",
    "DETAIL",
    "EDIT",
    "ENTITY_HISTORY",
    "FocusContext",
    "Identifier",
    "LoadingState",
    "OperationKey",
    "OverlayId",
    "RecordRef",
    "Scope",
    "ScreenCatalog",
    "UnknownCategoryError",
    "UnknownOverlayError",
    "UnknownScopeError",
    "UseCaseError",
]
