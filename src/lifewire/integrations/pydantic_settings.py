from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from lifewire.lock_mode import LockMode


class LifewireSettings(BaseSettings):
    """Environment-driven configuration for lifewire stores.

    Values are read from ``LIFEWIRE_``-prefixed environment variables, for
    example ``LIFEWIRE_LOCK_MODE=none``.

    Examples:
        .. code-block:: python

            store = InterceptionStore.from_settings(LifewireSettings())

    """

    model_config = SettingsConfigDict(env_prefix="LIFEWIRE_")

    lock_mode: LockMode = LockMode.THREAD
    """Locking strategy of the interception store tables."""


__all__ = ["LifewireSettings"]
