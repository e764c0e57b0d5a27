from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import TYPE_CHECKING, Any, TypeAlias

from lifewire.attributes import Attributes
from lifewire.bean import Destruction, Id
from lifewire.exceptions import LifewireInvalidArgumentError
from lifewire.introspection import Executable
from lifewire.lock_mode import LockMode

if TYPE_CHECKING:
    from typing_extensions import Self

    from lifewire.integrations.pydantic_settings import LifewireSettings

logger = logging.getLogger(__name__)

BindingsByExecutable: TypeAlias = Mapping[Executable, frozenset[Attributes]]
"""Interceptor bindings of each declared constructor or method that has any."""

PreDestroyAction: TypeAlias = Callable[[Any, Destruction], None]
"""Deferred pre-destroy interception, called with the instance and its destruction token."""


class InterceptionStore:
    """Own the shared state of interception across productions and disposals.

    Two tables live here: interceptor bindings cached per ``Id`` and pending
    pre-destroy actions keyed by destruction token. A store is created with the
    container that uses it and closed with it, so separate containers (and
    separate tests) never see each other's entries.

    Locks are only held for table reads and writes, never while computing
    bindings or running actions.
    """

    def __init__(self, *, lock_mode: LockMode = LockMode.THREAD) -> None:
        """Initialize an empty store.

        Args:
            lock_mode: Locking strategy for the tables. Keep ``THREAD`` unless
                every production and disposal happens on one thread.

        """
        self.lock_mode = lock_mode
        self._lock = lock_mode.new_lock()
        self._bindings: dict[Id, BindingsByExecutable] = {}
        self._pre_destroys: dict[Destruction, PreDestroyAction] = {}

    @classmethod
    def from_settings(cls, settings: LifewireSettings) -> InterceptionStore:
        """Create a store configured from environment-driven settings.

        Args:
            settings: Loaded ``LifewireSettings``.

        """
        return cls(lock_mode=settings.lock_mode)

    def bindings(
        self,
        id_: Id,
        compute: Callable[[Id], BindingsByExecutable],
    ) -> BindingsByExecutable:
        """Return cached bindings for ``id_``, computing them on first use.

        Concurrent first calls may each compute; the first stored result wins
        and is returned to every caller.

        Args:
            id_: Identity whose bindings are requested.
            compute: Pure function deriving bindings from the identity.

        """
        with self._lock:
            cached = self._bindings.get(id_)
        if cached is not None:
            return cached

        computed = compute(id_)
        with self._lock:
            stored = self._bindings.setdefault(id_, computed)
        if stored is computed:
            logger.debug("Cached interceptor bindings for %r: %d executable(s)", id_, len(computed))
        return stored

    def register_pre_destroy(self, destruction: Destruction, action: PreDestroyAction) -> None:
        """Register the pre-destroy action to run when ``destruction`` is disposed of.

        Args:
            destruction: Token the matching ``dispose`` call will receive.
            action: Deferred pre-destroy interception.

        """
        if destruction is None:
            msg = "A destruction token is required to register a pre-destroy action."
            raise LifewireInvalidArgumentError(msg)
        with self._lock:
            self._pre_destroys[destruction] = action

    def pop_pre_destroy(self, destruction: Destruction) -> PreDestroyAction | None:
        """Remove and return the action registered for ``destruction``.

        Removal is atomic: when several callers race on one token, exactly one
        receives the action and the others receive ``None``.

        Args:
            destruction: Token passed to ``dispose``.

        """
        with self._lock:
            return self._pre_destroys.pop(destruction, None)

    @property
    def pending_pre_destroys(self) -> int:
        """Return the number of produced instances still awaiting pre-destroy."""
        with self._lock:
            return len(self._pre_destroys)

    @property
    def cached_bindings(self) -> int:
        """Return the number of identities with cached bindings."""
        with self._lock:
            return len(self._bindings)

    def close(self) -> None:
        """Drop every cached binding and pending pre-destroy action."""
        with self._lock:
            pending = len(self._pre_destroys)
            self._bindings.clear()
            self._pre_destroys.clear()
        if pending:
            logger.debug("Closed interception store with %d undisposed instance(s)", pending)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
