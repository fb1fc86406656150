"""Directory of per-category refresh callbacks owned by the screen controller.

Record list components mount and unmount independently of the controller.
On mount they register a zero-argument refetch callable under their category
key; the controller or a mutation handler later asks the registry to refresh
one category or all of them without knowing how the data is fetched.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Union

from ..domain.catalog import ScreenCatalog
from ..domain.entities import CategoryKey

RefreshCallback = Callable[[], Union[None, Awaitable[Any], Any]]


class RefreshRegistry:
    """Hold at most one refresh callback per catalog category."""

    def __init__(self, catalog: Optional[ScreenCatalog] = None) -> None:
        """Create an empty registry for the categories of ``catalog``.

        Args:
            catalog: Screen catalog whose categories bound the valid keys.
        """
        self.catalog = catalog or ScreenCatalog.default()
        self._log = logging.getLogger(__name__)
        self._callbacks: Dict[CategoryKey, RefreshCallback] = {}

    def register(self, category: CategoryKey, callback: RefreshCallback) -> None:
        """Store ``callback`` for ``category``, replacing any previous one.

        Raises:
            UnknownCategoryError: ``category`` is not part of the catalog.
            TypeError: ``callback`` is not callable.
        """
        self.catalog.require_category(category)
        if not callable(callback):
            raise TypeError(f"Refresh callback for {category} must be callable.")
        if category in self._callbacks:
            self._log.debug("Replacing refresh callback for %s", category)
        self._callbacks[category] = callback

    def unregister(self, category: CategoryKey, callback: Optional[RefreshCallback] = None) -> None:
        """Empty the slot for ``category``.

        Args:
            category: Category key to clear.
            callback: When given, the slot is cleared only if it still holds
                this callback, so a late unmount cannot drop a newer
                registration made by a remounted component.
        """
        self.catalog.require_category(category)
        current = self._callbacks.get(category)
        if current is None:
            return
        if callback is not None and current != callback:
            self._log.debug("Keeping newer refresh callback for %s", category)
            return
        del self._callbacks[category]

    def is_registered(self, category: CategoryKey) -> bool:
        self.catalog.require_category(category)
        return category in self._callbacks

    def registered(self) -> Tuple[CategoryKey, ...]:
        """Return registered keys in catalog order."""
        return tuple(key for key in self.catalog.categories if key in self._callbacks)

    def clear(self) -> None:
        self._callbacks.clear()

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------
    def refresh(self, category: CategoryKey) -> bool:
        """Invoke the callback for ``category`` if one is registered.

        Returns:
            ``True`` when a callback ran without raising, ``False`` when the
            slot is empty or the callback failed. Failures are logged and
            never propagated. Awaitables returned by the callback are not
            awaited; use :meth:`refresh_async` for coroutine callbacks.
        """
        self.catalog.require_category(category)
        callback = self._callbacks.get(category)
        if callback is None:
            return False
        try:
            result = callback()
        except Exception:
            self._log.warning("Refresh callback for %s failed", category, exc_info=True)
            return False
        if inspect.iscoroutine(result):
            # Not awaited here; close it so it does not warn on collection.
            result.close()
            self._log.warning(
                "Refresh callback for %s returned a coroutine; use refresh_async", category
            )
            return False
        return True

    def refresh_all(self) -> Dict[CategoryKey, bool]:
        """Refresh every catalog category, isolating per-category failures."""
        return {key: self.refresh(key) for key in self.catalog.categories}

    async def refresh_async(self, category: CategoryKey) -> bool:
        """Like :meth:`refresh` but awaits callbacks that return awaitables."""
        self.catalog.require_category(category)
        callback = self._callbacks.get(category)
        if callback is None:
            return False
        try:
            result = callback()
            if inspect.isawaitable(result):
                await result
        except Exception:
            self._log.warning("Refresh callback for %s failed", category, exc_info=True)
            return False
        return True

    async def refresh_all_async(self) -> Dict[CategoryKey, bool]:
        """Refresh every catalog category concurrently, isolating failures."""
        keys = self.catalog.categories
        outcomes = await asyncio.gather(*(self.refresh_async(key) for key in keys))
        return dict(zip(keys, outcomes))


__all__ = ["RefreshCallback", "RefreshRegistry"]
