"""Controller for the sacraments management screen.

The controller composes three peers that never reference each other: the
:class:`ModalCoordinator` (open overlays and focus), the
:class:`LoadingTracker` (busy flags per scope), and the
:class:`RefreshRegistry` (refetch callbacks of mounted record lists). Record
workflows run their mutation under the matching workflow and category scopes
and, once it succeeds, close the overlay and refresh the affected list.
A failed mutation re-raises, leaves its overlay open, and refreshes nothing.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, Union

from sacra.app.record_list_controller import RecordListController
from sacra.app.refresh_registry import RefreshRegistry
from sacra.domain.catalog import ANALYTICS, DELETE_CONFIRM, EDIT, EXPORT, ScreenCatalog
from sacra.domain.entities import CategoryKey, Identifier, RecordRef, Scope
from sacra.domain.ports import RecordSource
from sacra.viewmodels.loading_vm import LoadingTracker
from sacra.viewmodels.modal_vm import ModalCoordinator
from sacra.viewmodels.settings_vm import ScreenSettings

T = TypeVar("T")
Mutation = Callable[[], Union[Awaitable[T], T]]


class SacramentsScreenController:
    """Own overlay, loading, and refresh state for one hosted screen."""

    def __init__(
        self,
        catalog: Optional[ScreenCatalog] = None,
        *,
        settings: Optional[ScreenSettings] = None,
    ) -> None:
        """Build the three coordination peers for ``catalog``.

        Args:
            catalog: Category and overlay enumerations; defaults to the
                sacraments catalog.
            settings: Screen settings forwarded to data sources built by the
                hosting application.
        """
        self._log = logging.getLogger(__name__)
        self.catalog = catalog or ScreenCatalog.default()
        self.settings = settings or ScreenSettings()
        self.modals = ModalCoordinator(self.catalog)
        self.loading = LoadingTracker(self.catalog)
        self.refresh = RefreshRegistry(self.catalog)
        self.pending_delete: Optional[RecordRef] = None

    # ------------------------------------------------------------------
    # Selectors used by rendering code
    # ------------------------------------------------------------------
    def is_open(self, overlay: str) -> bool:
        return self.modals.is_open(overlay)

    def is_any_loading(self) -> bool:
        return self.loading.is_any_loading()

    def is_operation_loading(self, fragment: str) -> bool:
        return self.loading.is_operation_loading(fragment)

    # ------------------------------------------------------------------
    # Overlay intents
    # ------------------------------------------------------------------
    def start_create(self, category: CategoryKey) -> None:
        self.modals.open_create(category)

    def view_record(self, record: RecordRef) -> None:
        self.modals.open_detail(record)

    def edit_record(self, record: RecordRef) -> None:
        self.modals.open_edit(record)

    def show_certificate(self, record: RecordRef) -> None:
        self.modals.open_certificate(record)

    def show_history(self, entity_id: Identifier) -> None:
        self.modals.open_entity_history(entity_id)

    def show_analytics(self) -> None:
        self.modals.open(ANALYTICS)

    def start_export(self) -> None:
        self.modals.open(EXPORT)

    def confirm_delete(self, record: RecordRef) -> None:
        """Ask for confirmation before deleting ``record``."""
        self.pending_delete = record
        self.modals.open(DELETE_CONFIRM)

    def cancel_delete(self) -> None:
        self.pending_delete = None
        self.modals.close(DELETE_CONFIRM)

    # ------------------------------------------------------------------
    # Record list wiring
    # ------------------------------------------------------------------
    def list_controller(
        self,
        category: CategoryKey,
        source: RecordSource,
        *,
        variables: Optional[Dict[str, Any]] = None,
    ) -> RecordListController:
        """Create an unmounted list controller bound to this screen's registry."""
        return RecordListController(category, source, self.refresh, variables=variables)

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------
    async def submit_create(
        self,
        category: CategoryKey,
        mutation: Mutation[T],
        label: Optional[str] = None,
    ) -> T:
        """Run a create mutation, then close the create overlay and refresh."""
        self.catalog.require_category(category)
        result = await self._run_workflow(
            "create", category, mutation, label or f"create {category}"
        )
        self.modals.close(category)
        await self.refresh.refresh_async(category)
        return result

    async def submit_edit(
        self,
        mutation: Mutation[T],
        record: Optional[RecordRef] = None,
        label: Optional[str] = None,
    ) -> T:
        """Run an edit mutation for ``record`` (defaults to the focused record)."""
        target = self._require_record(record)
        result = await self._run_workflow(
            "edit", target.category, mutation, label or f"edit {target.id}", target.id
        )
        self.modals.close(EDIT)
        await self._refresh_for(target)
        return result

    async def delete_record(
        self,
        mutation: Mutation[T],
        record: Optional[RecordRef] = None,
        label: Optional[str] = None,
    ) -> T:
        """Run a delete mutation for ``record`` (defaults to the pending delete)."""
        target = record or self.pending_delete
        if target is None:
            raise RuntimeError("No record selected for deletion.")
        result = await self._run_workflow(
            "delete", target.category, mutation, label or f"delete {target.id}", target.id
        )
        self.pending_delete = None
        self.modals.close(DELETE_CONFIRM)
        selected = self.modals.selected_record
        if selected is not None and selected.id == target.id:
            for overlay in self.catalog.record_focus_overlays:
                self.modals.close(overlay)
        await self._refresh_for(target)
        return result

    async def generate_certificate(
        self,
        render: Mutation[T],
        record: Optional[RecordRef] = None,
        label: Optional[str] = None,
    ) -> T:
        """Render a certificate; the certificate overlay stays open to show it."""
        target = self._require_record(record)
        result = await self._run_workflow(
            "certificate",
            target.category,
            render,
            label or f"certificate {target.id}",
            target.id,
        )
        await self._refresh_for(target)
        return result

    async def export_records(
        self,
        exporter: Mutation[T],
        category: Optional[CategoryKey] = None,
        label: Optional[str] = None,
    ) -> T:
        """Export records of one category (or all); exports change no data."""
        if category is not None:
            self.catalog.require_category(category)
        result = await self._run_workflow(
            "export", category, exporter, label or f"export {category or 'all'}"
        )
        self.modals.close(EXPORT)
        return result

    async def refresh_everything(self) -> Dict[CategoryKey, bool]:
        """Broadcast refresh to every mounted list under the global scope."""
        return await self.loading.run_with_tracking(
            Scope.global_(), self.refresh.refresh_all_async, label="refresh all"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Cancel everything: close overlays and clear busy flags."""
        self.pending_delete = None
        self.modals.close_all()
        self.loading.clear_all()

    def dispose(self) -> None:
        """Tear down when the hosting screen is destroyed."""
        self.reset()
        self.refresh.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def _run_workflow(
        self,
        workflow: str,
        category: Optional[CategoryKey],
        fn: Mutation[T],
        label: str,
        record_id: Optional[Identifier] = None,
    ) -> T:
        scope = Scope.workflow(workflow)
        try:
            if category is None or not self.catalog.has_category(category):
                return await self.loading.run_with_tracking(scope, fn, label, record_id)
            with self.loading.tracking(Scope.category(category), label, record_id):
                return await self.loading.run_with_tracking(scope, fn, label, record_id)
        except Exception as exc:
            self._log.info("%s failed: %s", label, exc)
            raise

    def _require_record(self, record: Optional[RecordRef]) -> RecordRef:
        target = record or self.modals.selected_record
        if target is None:
            raise RuntimeError("No record is in focus.")
        return target

    async def _refresh_for(self, record: RecordRef) -> None:
        if record.category and self.catalog.has_category(record.category):
            await self.refresh.refresh_async(record.category)
        else:
            await self.refresh.refresh_all_async()


__all__ = ["Mutation", "SacramentsScreenController"]
