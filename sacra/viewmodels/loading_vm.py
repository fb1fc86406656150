"""Busy/idle state per operation scope with guaranteed release bookkeeping.

Scopes are the global singleton, one per catalog category, and one per
workflow overlay (create/edit/delete/certificate/export). Each scope keeps a
list of in-flight operation tokens so overlapping operations keep it busy
until every one of them has settled.

An operation that never settles leaves its scope busy; cancellation must
still deliver a settle signal for the release path to run.
"""

from __future__ import annotations

import inspect
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from itertools import count
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    TypeVar,
    Union,
)

from ..domain.catalog import ScreenCatalog
from ..domain.entities import (
    GLOBAL_SCOPE_KEY,
    Identifier,
    LoadingState,
    OperationKey,
    Scope,
)
from ..domain.errors import UnknownScopeError

T = TypeVar("T")
ScopeLike = Union[Scope, str]


@dataclass(frozen=True)
class _Operation:
    token: int
    label: Optional[str]
    record_id: Optional[Identifier]


class LoadingTracker:
    """Track loading flags for the global, category, and workflow scopes."""

    def __init__(
        self,
        catalog: Optional[ScreenCatalog] = None,
        *,
        on_change: Optional[Callable[["LoadingTracker"], None]] = None,
    ) -> None:
        self.catalog = catalog or ScreenCatalog.default()
        self.on_change = on_change
        self._log = logging.getLogger(__name__)
        self._tokens = count(1)
        self._scopes: Dict[str, Scope] = {}
        self._ops: Dict[str, List[_Operation]] = {}
        for scope in self._configured_scopes():
            self._scopes[scope.key] = scope
            self._ops[scope.key] = []

    def _configured_scopes(self) -> List[Scope]:
        scopes = [Scope.global_()]
        scopes.extend(Scope.category(key) for key in self.catalog.categories)
        scopes.extend(Scope.workflow(name) for name in self.catalog.workflows)
        return scopes

    # ------------------------------------------------------------------
    # Scope resolution
    # ------------------------------------------------------------------
    def resolve_scope(self, scope: ScopeLike) -> Scope:
        """Map a :class:`Scope` or its string form onto a configured scope.

        Accepted strings: ``GLOBAL``, a category key, a workflow name, or the
        prefixed key form (``category:BAPTISM``, ``workflow:edit``).
        """
        if isinstance(scope, Scope):
            if scope.key in self._scopes:
                return self._scopes[scope.key]
            raise UnknownScopeError(scope.key, self._scopes)
        if not isinstance(scope, str):
            raise UnknownScopeError(scope, self._scopes)
        if scope in self._scopes:
            return self._scopes[scope]
        if scope.upper() == GLOBAL_SCOPE_KEY:
            return self._scopes[GLOBAL_SCOPE_KEY]
        if scope in self.catalog.categories:
            return self._scopes[Scope.category(scope).key]
        if scope in self.catalog.workflows:
            return self._scopes[Scope.workflow(scope).key]
        raise UnknownScopeError(scope, self._scopes)

    @property
    def scopes(self) -> List[Scope]:
        return list(self._scopes.values())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def set_loading(
        self,
        scope: ScopeLike,
        busy: bool,
        label: Optional[str] = None,
        record_id: Optional[Identifier] = None,
    ) -> None:
        """Replace the state of ``scope``; the last writer wins, nothing is merged."""
        key = self.resolve_scope(scope).key
        if busy:
            self._ops[key] = [_Operation(next(self._tokens), label, record_id)]
        else:
            self._ops[key] = []
        self._notify()

    def begin(
        self,
        scope: ScopeLike,
        label: Optional[str] = None,
        record_id: Optional[Identifier] = None,
    ) -> int:
        """Mark one more operation in flight on ``scope`` and return its token."""
        key = self.resolve_scope(scope).key
        op = _Operation(next(self._tokens), label, record_id)
        self._ops[key].append(op)
        self._log.debug("Begin %s (%s), %d in flight", key, label or "-", len(self._ops[key]))
        self._notify()
        return op.token

    def end(self, scope: ScopeLike, token: Optional[int] = None) -> None:
        """Release one operation on ``scope``; ``token`` selects which one."""
        key = self.resolve_scope(scope).key
        ops = self._ops[key]
        if not ops:
            self._log.warning("end() called on idle loading scope %s", key)
            return
        if token is None:
            ops.pop()
        else:
            remaining = [op for op in ops if op.token != token]
            if len(remaining) == len(ops):
                # Overridden by set_loading while in flight; nothing left to release.
                self._log.warning("Token %s already released on %s by set_loading", token, key)
                return
            self._ops[key] = remaining
        self._log.debug("End %s, %d in flight", key, len(self._ops[key]))
        self._notify()

    def clear_all(self) -> None:
        for key in self._ops:
            self._ops[key] = []
        self._notify()

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------
    def state(self, scope: ScopeLike) -> LoadingState:
        key = self.resolve_scope(scope).key
        ops = self._ops[key]
        if not ops:
            return LoadingState()
        latest = ops[-1]
        return LoadingState(
            count=len(ops),
            label=latest.label,
            record_id=latest.record_id,
            labels=tuple(op.label for op in ops if op.label),
        )

    def is_loading(self, scope: ScopeLike) -> bool:
        return bool(self._ops[self.resolve_scope(scope).key])

    def is_any_loading(self) -> bool:
        return any(self._ops.values())

    def active(self) -> List[OperationKey]:
        """Return every in-flight operation in scope order."""
        result: List[OperationKey] = []
        for key, ops in self._ops.items():
            scope = self._scopes[key]
            result.extend(OperationKey(scope=scope, label=op.label) for op in ops)
        return result

    def is_operation_loading(self, fragment: str) -> bool:
        """Return True when an active operation's label or scope name contains ``fragment``."""
        if not fragment:
            return self.is_any_loading()
        for op in self.active():
            if fragment in op.scope.name or fragment in op.scope.key:
                return True
            if op.label and fragment in op.label:
                return True
        return False

    # ------------------------------------------------------------------
    # Wrappers
    # ------------------------------------------------------------------
    async def run_with_tracking(
        self,
        scope: ScopeLike,
        fn: Callable[[], Union[Awaitable[T], T]],
        label: Optional[str] = None,
        record_id: Optional[Identifier] = None,
    ) -> T:
        """Await ``fn()`` with ``scope`` busy, releasing it however ``fn`` settles.

        Failures raised by ``fn`` propagate unchanged after the release.
        """
        resolved = self.resolve_scope(scope)
        token = self.begin(resolved, label, record_id)
        try:
            result: Any = fn()
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            self.end(resolved, token)

    @contextmanager
    def tracking(
        self,
        scope: ScopeLike,
        label: Optional[str] = None,
        record_id: Optional[Identifier] = None,
    ) -> Iterator[Scope]:
        """Synchronous counterpart of :meth:`run_with_tracking`."""
        resolved = self.resolve_scope(scope)
        token = self.begin(resolved, label, record_id)
        try:
            yield resolved
        finally:
            self.end(resolved, token)

    def _notify(self) -> None:
        if not self.on_change:
            return
        try:
            self.on_change(self)
        except Exception:
            self._log.warning("Loading on_change callback failed", exc_info=True)


__all__ = ["LoadingTracker", "ScopeLike"]
