"""In-process backend: nothing is persisted beyond the process lifetime."""

from __future__ import annotations

from typing import Mapping, Optional

from shared_preferences.backends.dict_backend import DictBackend
from shared_preferences.common.values import PreferenceValue, infer_type, validate


class MemoryBackend(DictBackend):
    def __init__(
        self,
        name: str = "default",
        initial: Optional[Mapping[str, PreferenceValue]] = None,
    ):
        super().__init__(name=name)
        for key, value in (initial or {}).items():
            value_type = infer_type(key, value)
            self._entries[key] = (value_type, validate(key, value_type, value))

    def flush(self) -> None:
        self._dirty = False
