"""Data controller behind one category's record list.

A list controller lives as long as the list view that hosts it. ``mount``
registers its async ``reload`` with the screen's refresh registry and ``unmount``
removes it again, so the screen controller can ask for fresh data without
knowing which query backs the list.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from sacra.app.refresh_registry import RefreshRegistry
from sacra.domain.entities import CategoryKey, RecordRef
from sacra.domain.ports import RecordSource


class RecordListController:
    """Fetch and cache the records of a single category."""

    def __init__(
        self,
        category: CategoryKey,
        source: RecordSource,
        registry: RefreshRegistry,
        *,
        variables: Optional[Dict[str, Any]] = None,
        on_records: Optional[Callable[[List[RecordRef]], None]] = None,
    ) -> None:
        """Bind the controller to a category, its data source, and a registry.

        Args:
            category: Catalog category key listed by this controller.
            source: Record source executing the category query.
            registry: Screen-scoped refresh registry to register with.
            variables: Extra query variables (branch, search term, page).
            on_records: Optional view callback receiving fresh rows.
        """
        registry.catalog.require_category(category)
        self._log = logging.getLogger(__name__)
        self.category = category
        self.source = source
        self.registry = registry
        self.variables = dict(variables or {})
        self.on_records = on_records
        self.records: List[RecordRef] = []
        self.error: Optional[Exception] = None
        self.refetch_count = 0
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self, *, fetch: bool = True) -> None:
        """Register :meth:`reload` for the category and optionally load once.

        The initial load runs synchronously; a host already inside an event
        loop should pass ``fetch=False`` and await :meth:`reload` instead.
        """
        self.registry.register(self.category, self.reload)
        self._mounted = True
        if fetch:
            try:
                self.refetch()
            except Exception:
                self._log.warning("Initial load of %s failed", self.category, exc_info=True)

    def unmount(self) -> None:
        """Drop this controller's registration; a newer one stays in place."""
        if not self._mounted:
            return
        self.registry.unregister(self.category, self.reload)
        self._mounted = False

    def refetch(self) -> List[RecordRef]:
        """Re-run the category query on the calling thread and publish the rows.

        Failures are stored on ``error`` and re-raised so the refresh registry
        logs them with the category key.
        """
        self.refetch_count += 1
        try:
            records = self.source.fetch_records(self.category, self.variables or None)
        except Exception as exc:
            self.error = exc
            raise
        return self._publish(records)

    async def reload(self) -> List[RecordRef]:
        """Like :meth:`refetch`, with the source call run in a worker thread."""
        self.refetch_count += 1
        try:
            records = await asyncio.to_thread(
                self.source.fetch_records, self.category, self.variables or None
            )
        except Exception as exc:
            self.error = exc
            raise
        return self._publish(records)

    def _publish(self, records: Iterable[RecordRef]) -> List[RecordRef]:
        self.error = None
        self.records = list(records)
        if self.on_records:
            self.on_records(list(self.records))
        return list(self.records)

    def __enter__(self) -> "RecordListController":
        self.mount()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unmount()


__all__ = ["RecordListController"]
