from __future__ import annotations

import threading
from contextlib import AbstractContextManager, nullcontext
from enum import Enum


class LockMode(Enum):
    """Select locking behavior for the shared interception tables.

    Use these values for ``InterceptionStore(lock_mode=...)``. Production code
    that may produce or dispose of instances from several threads should keep
    the default ``THREAD`` mode.
    """

    THREAD = "thread"
    """Guard table reads/writes with ``threading.Lock``."""

    NONE = "none"
    """Disable locking around table reads/writes for single-threaded use."""

    def new_lock(self) -> AbstractContextManager[object]:
        """Create a fresh lock object for this mode."""
        if self is LockMode.THREAD:
            return threading.Lock()
        return nullcontext()
