from shared_preferences.backends.base import BackendError, BackendStore
from shared_preferences.backends.dict_backend import DictBackend
from shared_preferences.backends.file_backend import DEFAULT_STORE_NAME, FileBackend
from shared_preferences.backends.memory import MemoryBackend
from shared_preferences.backends.prefs_proto import decode_preferences_data, encode_preferences_data

__all__ = [
    "DEFAULT_STORE_NAME",
    "BackendError",
    "BackendStore",
    "DictBackend",
    "FileBackend",
    "MemoryBackend",
    "encode_preferences_data",
    "decode_preferences_data",
]
