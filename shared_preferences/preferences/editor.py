"""Editor: stages typed writes and applies them to the backend on commit."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, AbstractSet, Any, Dict, Optional, Union

from shared_preferences.backends.base import BackendError, BackendStore
from shared_preferences.common.logger import get_logger
from shared_preferences.common.values import (
    Entry,
    UnsupportedValueError,
    ValueType,
    infer_type,
    validate,
)

if TYPE_CHECKING:
    from shared_preferences.preferences.preferences import Preferences


class _RemoveMarker:
    def __repr__(self) -> str:
        return "<remove>"


REMOVE = _RemoveMarker()

# None stands for an explicit null write, which removes the key
PendingValue = Union[Entry, _RemoveMarker, None]


class Editor:
    """A batch of uncommitted edits for one Preferences instance.

    Every mutator returns the editor so calls can be chained::

        prefs.edit().put_int("launches", 3).remove("legacy").commit()

    Commit and apply may be called repeatedly; once the staged edits have
    been applied the edit set is empty and later calls are no-ops.
    """

    def __init__(self, preferences: "Preferences", backend: BackendStore):
        self._preferences = preferences
        self._backend = backend
        self._lock = threading.Lock()
        # Both are swapped wholesale, never mutated in place
        self._edits: Dict[str, PendingValue] = {}
        self._clear = False

    def __enter__(self) -> "Editor":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
        else:
            with self._lock:
                self._edits = {}
                self._clear = False
        return False

    def _stage(self, key: str, pending: PendingValue) -> "Editor":
        with self._lock:
            self._edits = {**self._edits, key: pending}
        return self

    def _stage_value(self, key: str, value_type: ValueType, value: Any) -> "Editor":
        return self._stage(key, (value_type, validate(key, value_type, value)))

    @property
    def pending_keys(self) -> tuple:
        return tuple(self._edits)

    def put_string(self, key: str, value: Optional[str]) -> "Editor":
        if value is None:
            return self._stage(key, None)
        return self._stage_value(key, ValueType.STRING, value)

    def put_int(self, key: str, value: int) -> "Editor":
        return self._stage_value(key, ValueType.INT, value)

    def put_long(self, key: str, value: int) -> "Editor":
        return self._stage_value(key, ValueType.LONG, value)

    def put_float(self, key: str, value: float) -> "Editor":
        return self._stage_value(key, ValueType.FLOAT, value)

    def put_boolean(self, key: str, value: bool) -> "Editor":
        return self._stage_value(key, ValueType.BOOLEAN, value)

    def put_string_set(self, key: str, values: Optional[AbstractSet[str]]) -> "Editor":
        if values is None:
            return self._stage(key, None)
        return self._stage_value(key, ValueType.STRING_SET, values)

    def put(self, key: str, value: Any) -> "Editor":
        """Stage a value, inferring its shape from the Python type."""
        if value is None:
            return self._stage(key, None)
        return self._stage_value(key, infer_type(key, value), value)

    def remove(self, key: str) -> "Editor":
        return self._stage(key, REMOVE)

    def clear(self) -> "Editor":
        """Remove every stored key before the staged edits are applied."""
        with self._lock:
            self._clear = True
        return self

    def _write(self, key: str, pending: PendingValue) -> None:
        backend = self._backend
        if pending is REMOVE or pending is None:
            backend.remove_key(key)
            return
        value_type, value = pending
        if value_type is ValueType.STRING:
            backend.set_string(key, value)
        elif value_type is ValueType.INT:
            backend.set_int(key, value)
        elif value_type is ValueType.LONG:
            backend.set_long(key, value)
        elif value_type is ValueType.FLOAT:
            backend.set_float(key, value)
        elif value_type is ValueType.BOOLEAN:
            backend.set_boolean(key, value)
        elif value_type is ValueType.STRING_SET:
            backend.set_string_set(key, value)
        else:
            raise UnsupportedValueError(f"Unexpected value for {key!r}: {pending!r}")

    def commit(self) -> bool:
        """Apply staged edits, notifying listeners after each key.

        Returns False if the backend failed; the staged edits are dropped
        either way.
        """
        log = get_logger(__name__)
        with self._lock:
            edits, clear = self._edits, self._clear
            self._edits, self._clear = {}, False

        store_name = self._backend.name
        try:
            if clear:
                all_keys = list(self._backend.get_all())
                for key in all_keys:
                    self._backend.remove_key(key)
                log.debug("editor: cleared store=%s keys=%d", store_name, len(all_keys))
                for key in all_keys:
                    if key not in edits:
                        self._preferences._notify(key)

            for key, pending in edits.items():
                self._write(key, pending)
                log.debug("editor: applied store=%s key=%s value=%r", store_name, key, pending)
                self._preferences._notify(key)

            self._backend.flush()
        except BackendError:
            log.warning(
                "editor: commit failed store=%s keys=%d", store_name, len(edits), exc_info=True
            )
            return False

        if edits or clear:
            log.debug("editor: commit ok store=%s keys=%d clear=%s", store_name, len(edits), clear)
        return True

    def apply(self) -> None:
        """Commit without reporting failure; backend errors are only logged."""
        self.commit()
