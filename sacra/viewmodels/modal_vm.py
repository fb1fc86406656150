"""Overlay visibility and focus state for the sacraments screen.

The coordinator owns the set of open overlays plus the :class:`FocusContext`
read by the detail, edit, certificate, and history overlays. Views query
``is_open`` and the focus properties; controllers call the open/close
commands. No rendering or I/O happens here.
"""

from __future__ import annotations

import logging
from typing import Callable, FrozenSet, Optional, Set

from ..domain.catalog import CERTIFICATE, DETAIL, EDIT, ScreenCatalog
from ..domain.entities import CategoryKey, FocusContext, Identifier, OverlayId, RecordRef
from ..domain.errors import UnknownOverlayError


class ModalCoordinator:
    """Track open overlays and the record or identifier currently in focus.

    Closing an overlay clears only the focus field that overlay owns: the
    record-focus overlays (``DETAIL``, ``EDIT``, ``CERTIFICATE``) share
    ``selected_record`` and the catalog's entity overlay owns
    ``selected_entity_id``. Any of the record-focus overlays clears the shared
    record when closed, regardless of which one set it.
    """

    def __init__(
        self,
        catalog: Optional[ScreenCatalog] = None,
        *,
        on_change: Optional[Callable[["ModalCoordinator"], None]] = None,
    ) -> None:
        self.catalog = catalog or ScreenCatalog.default()
        self.on_change = on_change
        self._log = logging.getLogger(__name__)
        self._open: Set[OverlayId] = set()
        self._focus = FocusContext()

    # ------------------------------------------------------------------
    # Read-only selectors
    # ------------------------------------------------------------------
    def is_open(self, overlay: OverlayId) -> bool:
        return self.catalog.require_overlay(overlay) in self._open

    @property
    def open_ids(self) -> FrozenSet[OverlayId]:
        return frozenset(self._open)

    @property
    def focus(self) -> FocusContext:
        return self._focus

    @property
    def selected_record(self) -> Optional[RecordRef]:
        return self._focus.selected_record

    @property
    def selected_entity_id(self) -> Optional[Identifier]:
        return self._focus.selected_entity_id

    # ------------------------------------------------------------------
    # Primitive commands
    # ------------------------------------------------------------------
    def open(self, overlay: OverlayId) -> None:
        """Show ``overlay``; opening an already open overlay changes nothing."""
        self.catalog.require_overlay(overlay)
        if overlay in self._open:
            return
        self._open.add(overlay)
        self._log.debug("Opened overlay %s", overlay)
        self._notify()

    def close(self, overlay: OverlayId) -> None:
        """Hide ``overlay`` and release the focus field it owns."""
        self.catalog.require_overlay(overlay)
        was_open = overlay in self._open
        self._open.discard(overlay)
        focus = self._focus
        if overlay in self.catalog.record_focus_overlays:
            focus = FocusContext(None, focus.selected_entity_id)
        elif overlay == self.catalog.entity_focus_overlay:
            focus = FocusContext(focus.selected_record, None)
        changed = was_open or focus != self._focus
        self._focus = focus
        if changed:
            self._log.debug("Closed overlay %s", overlay)
            self._notify()

    def close_all(self) -> None:
        """Hide every overlay and clear the whole focus context at once."""
        if not self._open and self._focus == FocusContext():
            return
        self._open.clear()
        self._focus = FocusContext()
        self._log.debug("Closed all overlays")
        self._notify()

    reset = close_all

    def set_focus_record(self, record: Optional[RecordRef]) -> None:
        self._focus = FocusContext(record, self._focus.selected_entity_id)
        self._notify()

    def set_focus_entity_id(self, entity_id: Optional[Identifier]) -> None:
        self._focus = FocusContext(self._focus.selected_record, entity_id)
        self._notify()

    # ------------------------------------------------------------------
    # Composite helpers: focus is set before the overlay opens
    # ------------------------------------------------------------------
    def open_detail(self, record: RecordRef) -> None:
        self._open_with_record(DETAIL, record)

    def open_edit(self, record: RecordRef) -> None:
        self._open_with_record(EDIT, record)

    def open_certificate(self, record: RecordRef) -> None:
        self._open_with_record(CERTIFICATE, record)

    def open_entity_history(self, entity_id: Identifier) -> None:
        overlay = self.catalog.entity_focus_overlay
        if overlay is None:
            raise UnknownOverlayError("entity history", self.catalog.overlays)
        self.set_focus_entity_id(entity_id)
        self.open(overlay)

    def open_create(self, category: CategoryKey) -> None:
        """Open the create overlay of ``category`` (its id equals the category key)."""
        self.open(self.catalog.require_category(category))

    def _open_with_record(self, overlay: OverlayId, record: RecordRef) -> None:
        self.catalog.require_overlay(overlay)
        self.set_focus_record(record)
        self.open(overlay)

    def _notify(self) -> None:
        if not self.on_change:
            return
        try:
            self.on_change(self)
        except Exception:
            self._log.warning("Overlay on_change callback failed", exc_info=True)


__all__ = ["ModalCoordinator"]
