"""Preferences facade: typed reads with defaults, editors and listeners."""

from __future__ import annotations

from typing import AbstractSet, Any, Callable, Optional, Set, TypeVar

from shared_preferences.backends.base import BackendData, BackendStore
from shared_preferences.preferences.editor import Editor
from shared_preferences.preferences.listeners import (
    ListenerRegistry,
    OnPreferenceChangeListener,
)

T = TypeVar("T")


class Preferences:
    """Typed view over one backend store.

    Reads go straight to the backend; there is no cache. A read returns the
    supplied default only when the key is absent. A value of the wrong shape
    raises PreferenceConversionError instead of falling back to the default.
    """

    def __init__(self, backend: BackendStore):
        self._backend = backend
        self._listeners = ListenerRegistry()

    @property
    def name(self) -> str:
        return self._backend.name

    @property
    def backend(self) -> BackendStore:
        return self._backend

    def __repr__(self) -> str:
        return f"Preferences(name={self.name!r}, backend={type(self._backend).__name__})"

    def get_all(self) -> BackendData:
        return self._backend.get_all()

    def _read(self, key: str, getter: Callable[[str], Any], default: T) -> T:
        if key in self:
            return getter(key)
        return default

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._read(key, self._backend.get_string, default)

    def get_int(self, key: str, default: int = 0) -> int:
        return self._read(key, self._backend.get_int, default)

    def get_long(self, key: str, default: int = 0) -> int:
        return self._read(key, self._backend.get_long, default)

    def get_float(self, key: str, default: float = 0.0) -> float:
        return self._read(key, self._backend.get_float, default)

    def get_boolean(self, key: str, default: bool = False) -> bool:
        return self._read(key, self._backend.get_boolean, default)

    def get_string_set(
        self, key: str, default: Optional[AbstractSet[str]] = None
    ) -> Optional[Set[str]]:
        return self._read(key, self._backend.get_string_set, default)

    def contains(self, key: str) -> bool:
        return self._backend.contains(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def edit(self) -> Editor:
        return Editor(self, self._backend)

    def register_listener(self, listener: OnPreferenceChangeListener) -> None:
        """Call listener(preferences, key) after each committed key change.

        Only a weak reference is kept: a listener with no other reference
        (a lambda, for example) stops firing once it is collected. Methods of
        built-in types are tracked through their instance, so registering
        ``counts.__setitem__`` works for a ``dict`` subclass but raises
        TypeError for a plain ``list`` or ``dict``, which cannot be weakly
        referenced.
        """
        self._listeners.register(listener)

    def unregister_listener(self, listener: OnPreferenceChangeListener) -> None:
        self._listeners.unregister(listener)

    def _notify(self, key: str) -> None:
        self._listeners.notify(self, key)
