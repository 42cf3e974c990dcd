from scopewire.lock_mode import LockMode
from scopewire.providers import Lifetime

DEFAULT_LIFETIME = Lifetime.TRANSIENT
"""Lifetime used by registrations that omit ``lifetime``."""

DEFAULT_LOCK_MODE = LockMode.THREAD
"""Lock mode used by containers that omit ``lock_mode``."""
