"""File backend: one protobuf file per store name, written atomically."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from shared_preferences.backends.base import BackendError
from shared_preferences.backends.dict_backend import DictBackend
from shared_preferences.backends.prefs_proto import decode_preferences_data, encode_preferences_data
from shared_preferences.common.logger import get_logger

DEFAULT_STORE_NAME = "default"
FILE_SUFFIX = ".prefs"


def default_directory() -> str:
    return os.environ.get("PREFS_DIR") or str(Path.home() / ".shared_preferences")


class FileBackend(DictBackend):
    """File-backed dictionary. Writes are buffered until flush()."""

    def __init__(
        self,
        name: Optional[str] = None,
        directory: Optional[str] = None,
        file_path: Optional[str] = None,
    ):
        super().__init__(name=name or DEFAULT_STORE_NAME)
        self.file_path = file_path or os.path.join(
            directory or default_directory(), self.name + FILE_SUFFIX
        )
        self._loaded = False

    def get_path(self) -> str:
        return self.file_path

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.reload()

    def reload(self) -> None:
        """Drop in-memory state and read the file again."""
        log = get_logger(__name__)
        log.debug("file backend: read start path=%s", self.file_path)

        with self._lock:
            if not os.path.isfile(self.file_path):
                self._entries = {}
                self._loaded = True
                self._dirty = False
                log.debug("file backend: file missing, starting empty path=%s", self.file_path)
                return

            try:
                with open(self.file_path, "rb") as f:
                    raw = f.read()
                entries = decode_preferences_data(raw)
            except (OSError, ValueError) as e:
                raise BackendError(f"Cannot load preferences from {self.file_path}: {e}") from e

            self._entries = entries
            self._loaded = True
            self._dirty = False
        log.info("file backend: read ok path=%s keys=%d", self.file_path, len(entries))

    def flush(self, force: bool = False) -> None:
        """Write current entries to file if anything changed. Atomic via tmp+rename."""
        with self._lock:
            if not (self._dirty or force):
                return
            payload = encode_preferences_data(self._entries)
            count = len(self._entries)
            tmp_path = self.file_path + ".tmp"
            try:
                Path(self.file_path).parent.mkdir(parents=True, exist_ok=True)
                with open(tmp_path, "wb") as f:
                    f.write(payload)
                os.replace(tmp_path, self.file_path)
            except OSError as e:
                raise BackendError(f"Cannot write preferences to {self.file_path}: {e}") from e
            self._dirty = False

        get_logger(__name__).info(
            "file backend: write ok path=%s keys=%d", self.file_path, count
        )
