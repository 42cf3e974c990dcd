from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior for cached instance construction.

    Pass a value as ``Container(lock_mode=...)``. Scopes inherit the lock mode
    of the container they were created from.
    """

    THREAD = "thread"
    """Guard first-time construction with a per-contract ``threading.RLock``."""

    NONE = "none"
    """Disable construction locks. Only safe when a container is used from one thread."""
