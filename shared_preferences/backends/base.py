"""Backend store base class (abstract).

The preferences facade depends on this type only, so a store can be backed
by memory, a file, or a platform service without changing editor logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AbstractSet, Dict, Optional, Set

from shared_preferences.common.values import PreferenceValue

BackendData = Dict[str, PreferenceValue]


class BackendError(Exception):
    """The underlying store failed to read or persist data."""


class BackendStore(ABC):
    name: str = "default"

    @abstractmethod
    def get_all(self) -> BackendData:
        """Get a snapshot of every stored entry."""
        ...

    @abstractmethod
    def get_string(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def get_int(self, key: str) -> Optional[int]:
        ...

    @abstractmethod
    def get_long(self, key: str) -> Optional[int]:
        ...

    @abstractmethod
    def get_float(self, key: str) -> Optional[float]:
        ...

    @abstractmethod
    def get_boolean(self, key: str) -> Optional[bool]:
        ...

    @abstractmethod
    def get_string_set(self, key: str) -> Optional[Set[str]]:
        ...

    @abstractmethod
    def contains(self, key: str) -> bool:
        """Return True if any value is stored under key."""
        ...

    @abstractmethod
    def set_string(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def set_int(self, key: str, value: int) -> None:
        ...

    @abstractmethod
    def set_long(self, key: str, value: int) -> None:
        ...

    @abstractmethod
    def set_float(self, key: str, value: float) -> None:
        ...

    @abstractmethod
    def set_boolean(self, key: str, value: bool) -> None:
        ...

    @abstractmethod
    def set_string_set(self, key: str, values: AbstractSet[str]) -> None:
        ...

    @abstractmethod
    def remove_key(self, key: str) -> None:
        """Remove key if present."""
        ...

    def flush(self) -> None:
        """Persist pending changes (no-op for stores that write through)."""
