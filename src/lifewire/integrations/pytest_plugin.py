from __future__ import annotations

from collections.abc import Iterator

import pytest

from lifewire.lock_mode import LockMode
from lifewire.proxy import ReflectiveInterceptionProxier
from lifewire.stores import InterceptionStore


@pytest.fixture()
def lifewire_store() -> Iterator[InterceptionStore]:
    """Create a per-test interception store, closed when the test ends.

    The fixture is function-scoped, so cached bindings and pending pre-destroy
    actions never leak between tests unless users override fixture scope
    explicitly.

    Yields:
        A new thread-safe ``InterceptionStore``.

    """
    with InterceptionStore(lock_mode=LockMode.THREAD) as store:
        yield store


@pytest.fixture()
def lifewire_proxier() -> ReflectiveInterceptionProxier:
    """Create the default reflective interception proxier.

    Returns:
        A ``ReflectiveInterceptionProxier`` using the default invocation engine.

    """
    return ReflectiveInterceptionProxier()
