"""Typed getters and setters over an in-process dictionary.

Entries are kept as ``(ValueType, value)`` pairs so the shape a value was
written with (int vs long in particular) is preserved for persistence.
"""

from __future__ import annotations

import threading
from typing import AbstractSet, Any, Dict, Optional, Set

from shared_preferences.backends.base import BackendData, BackendStore
from shared_preferences.common.values import Entry, PreferenceValue, ValueType, convert


class DictBackend(BackendStore):
    def __init__(self, name: str = "default"):
        self.name = name
        self._entries: Dict[str, Entry] = {}
        self._lock = threading.RLock()
        self._dirty = False

    def _ensure_loaded(self) -> None:
        """Hook for stores that populate ``_entries`` lazily."""

    def entries(self) -> Dict[str, Entry]:
        """Snapshot of the typed entries."""
        with self._lock:
            self._ensure_loaded()
            return dict(self._entries)

    def get_all(self) -> BackendData:
        with self._lock:
            self._ensure_loaded()
            return {key: value for key, (_, value) in self._entries.items()}

    def _get(self, key: str, value_type: ValueType) -> Any:
        with self._lock:
            self._ensure_loaded()
            entry = self._entries.get(key)
        if entry is None:
            return None
        return convert(key, value_type, entry[1])

    def get_string(self, key: str) -> Optional[str]:
        return self._get(key, ValueType.STRING)

    def get_int(self, key: str) -> Optional[int]:
        return self._get(key, ValueType.INT)

    def get_long(self, key: str) -> Optional[int]:
        return self._get(key, ValueType.LONG)

    def get_float(self, key: str) -> Optional[float]:
        return self._get(key, ValueType.FLOAT)

    def get_boolean(self, key: str) -> Optional[bool]:
        return self._get(key, ValueType.BOOLEAN)

    def get_string_set(self, key: str) -> Optional[Set[str]]:
        return self._get(key, ValueType.STRING_SET)

    def contains(self, key: str) -> bool:
        with self._lock:
            self._ensure_loaded()
            return key in self._entries

    def _set(self, key: str, value_type: ValueType, value: PreferenceValue) -> None:
        with self._lock:
            self._ensure_loaded()
            self._entries[key] = (value_type, value)
            self._dirty = True

    def set_string(self, key: str, value: str) -> None:
        self._set(key, ValueType.STRING, value)

    def set_int(self, key: str, value: int) -> None:
        self._set(key, ValueType.INT, value)

    def set_long(self, key: str, value: int) -> None:
        self._set(key, ValueType.LONG, value)

    def set_float(self, key: str, value: float) -> None:
        self._set(key, ValueType.FLOAT, float(value))

    def set_boolean(self, key: str, value: bool) -> None:
        self._set(key, ValueType.BOOLEAN, value)

    def set_string_set(self, key: str, values: AbstractSet[str]) -> None:
        self._set(key, ValueType.STRING_SET, frozenset(values))

    def remove_key(self, key: str) -> None:
        with self._lock:
            self._ensure_loaded()
            if self._entries.pop(key, None) is not None:
                self._dirty = True
