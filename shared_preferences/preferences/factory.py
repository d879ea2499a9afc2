"""Process-wide Preferences instances, one per store name.

Env:
- PREFS_BACKEND: file|memory (default: file)
- PREFS_DIR: directory for file-backed stores (default: ~/.shared_preferences)
"""

from __future__ import annotations

import os
import threading
from typing import Dict, Optional

from dotenv import load_dotenv

from shared_preferences.backends.base import BackendStore
from shared_preferences.backends.file_backend import DEFAULT_STORE_NAME, FileBackend
from shared_preferences.backends.memory import MemoryBackend
from shared_preferences.common.logger import get_logger
from shared_preferences.preferences.preferences import Preferences

load_dotenv()

BACKEND_KINDS = ("file", "memory")

_instances: Dict[str, Preferences] = {}
_instances_lock = threading.Lock()


def create_backend(name: str, kind: Optional[str] = None) -> BackendStore:
    kind = (kind or os.getenv("PREFS_BACKEND") or "file").lower().strip()
    if kind == "file":
        return FileBackend(name=name)
    if kind == "memory":
        return MemoryBackend(name=name)
    raise ValueError(f"Unknown preferences backend {kind!r} (expected one of {BACKEND_KINDS})")


def get_preferences(
    name: Optional[str] = None,
    backend: Optional[BackendStore] = None,
) -> Preferences:
    """Return the Preferences for name, creating it on first use.

    A backend passed in is only used when the name has no instance yet.
    """
    name = name or DEFAULT_STORE_NAME
    with _instances_lock:
        prefs = _instances.get(name)
        if prefs is None:
            prefs = Preferences(backend or create_backend(name))
            _instances[name] = prefs
            get_logger(__name__).debug(
                "preferences: created name=%s backend=%s", name, type(prefs.backend).__name__
            )
        return prefs


def reset_preferences() -> None:
    """Forget cached instances (tests and long-running tools that switch PREFS_DIR)."""
    with _instances_lock:
        _instances.clear()
