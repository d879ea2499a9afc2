import os
import shutil
import tempfile

import pytest

from shared_preferences.backends import BackendError, FileBackend, MemoryBackend
from shared_preferences.backends.prefs_proto import decode_preferences_data, encode_preferences_data
from shared_preferences.common.values import (
    PreferenceConversionError,
    UnsupportedValueError,
    ValueType,
)


# ---------- fixtures ----------

@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp(prefix="prefs-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


# ============================================================
# Protobuf encode / decode
# ============================================================

class TestPreferencesProto:
    def test_roundtrip_empty(self):
        buf = encode_preferences_data({})
        assert len(buf) == 0
        assert decode_preferences_data(buf) == {}

    def test_roundtrip_every_shape(self):
        data = {
            "name": (ValueType.STRING, "Ada"),
            "launches": (ValueType.INT, -42),
            "installed_at": (ValueType.LONG, 1_700_000_000_000),
            "ratio": (ValueType.FLOAT, 0.25),
            "dark_mode": (ValueType.BOOLEAN, True),
            "tags": (ValueType.STRING_SET, frozenset({"a", "b"})),
        }
        assert decode_preferences_data(encode_preferences_data(data)) == data

    def test_edge_values(self):
        data = {
            "empty": (ValueType.STRING, ""),
            "no_tags": (ValueType.STRING_SET, frozenset()),
            "int_min": (ValueType.INT, -(2**31)),
            "int_max": (ValueType.INT, 2**31 - 1),
            "long_min": (ValueType.LONG, -(2**63)),
            "long_max": (ValueType.LONG, 2**63 - 1),
            "off": (ValueType.BOOLEAN, False),
            "negative": (ValueType.FLOAT, -1.5),
        }
        assert decode_preferences_data(encode_preferences_data(data)) == data

    def test_unicode(self):
        data = {"note é": (ValueType.STRING, "hello \U0001f600")}
        assert decode_preferences_data(encode_preferences_data(data)) == data

    def test_unknown_top_level_field_is_skipped(self):
        buf = encode_preferences_data({"k": (ValueType.INT, 1)})
        # field 2, varint, value 1
        assert decode_preferences_data(buf + bytes([0x10, 0x01])) == {"k": (ValueType.INT, 1)}

    def test_set_encoding_is_stable(self):
        a = encode_preferences_data({"s": (ValueType.STRING_SET, frozenset({"x", "y", "z"}))})
        b = encode_preferences_data({"s": (ValueType.STRING_SET, frozenset({"z", "x", "y"}))})
        assert a == b

    def test_truncated_buffer_raises(self):
        buf = encode_preferences_data({"key": (ValueType.STRING, "value")})
        with pytest.raises(ValueError):
            decode_preferences_data(buf[: len(buf) - 3])


# ============================================================
# MemoryBackend
# ============================================================

class TestMemoryBackend:
    def test_missing_key_reads_none(self):
        backend = MemoryBackend()
        assert backend.contains("a") is False
        assert backend.get_string("a") is None
        assert backend.get_string_set("a") is None

    def test_initial_values_are_typed(self):
        backend = MemoryBackend(initial={"n": 3, "big": 2**40, "s": "x", "set": {"a"}})
        entries = backend.entries()
        assert entries["n"] == (ValueType.INT, 3)
        assert entries["big"] == (ValueType.LONG, 2**40)
        assert backend.get_string_set("set") == {"a"}

    def test_initial_values_reject_unknown_shapes(self):
        with pytest.raises(UnsupportedValueError):
            MemoryBackend(initial={"bad": [1, 2]})

    def test_typed_setters(self):
        backend = MemoryBackend()
        backend.set_long("l", 7)
        backend.set_float("f", 2)
        backend.set_string_set("s", {"a", "b"})
        assert backend.get_long("l") == 7
        assert backend.get_int("l") == 7
        assert backend.get_float("f") == 2.0
        assert backend.get_string_set("s") == {"a", "b"}

    def test_get_all_is_a_snapshot(self):
        backend = MemoryBackend(initial={"k": "v"})
        snapshot = backend.get_all()
        snapshot["k"] = "modified"
        assert backend.get_string("k") == "v"

    def test_string_set_read_of_scalar_fails(self):
        backend = MemoryBackend(initial={"k": "v"})
        with pytest.raises(PreferenceConversionError):
            backend.get_string_set("k")

    def test_scalar_read_of_string_set_fails(self):
        backend = MemoryBackend(initial={"k": {"v"}})
        with pytest.raises(PreferenceConversionError):
            backend.get_string("k")

    def test_mismatched_scalar_reads_fail(self):
        backend = MemoryBackend(initial={"flag": True, "n": 1, "big": 2**40})
        with pytest.raises(PreferenceConversionError):
            backend.get_int("flag")
        with pytest.raises(PreferenceConversionError):
            backend.get_float("n")
        with pytest.raises(PreferenceConversionError):
            backend.get_int("big")

    def test_remove_key(self):
        backend = MemoryBackend(initial={"k": "v"})
        backend.remove_key("k")
        backend.remove_key("never-there")
        assert backend.contains("k") is False


# ============================================================
# FileBackend
# ============================================================

class TestFileBackend:
    def test_missing_file_starts_empty(self, tmp_dir):
        backend = FileBackend(name="missing", directory=tmp_dir)
        assert backend.get_all() == {}
        assert not os.path.exists(backend.get_path())

    def test_path_from_name_and_directory(self, tmp_dir):
        backend = FileBackend(name="settings", directory=tmp_dir)
        assert backend.get_path() == os.path.join(tmp_dir, "settings.prefs")

    def test_directory_from_env(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("PREFS_DIR", tmp_dir)
        backend = FileBackend(name="env")
        assert backend.get_path() == os.path.join(tmp_dir, "env.prefs")

    def test_nothing_written_until_flush(self, tmp_dir):
        backend = FileBackend(name="lazy", directory=tmp_dir)
        backend.set_string("k", "v")
        assert not os.path.exists(backend.get_path())
        backend.flush()
        assert os.path.exists(backend.get_path())

    def test_flush_and_reload_keep_shapes(self, tmp_dir):
        backend = FileBackend(name="shapes", directory=tmp_dir)
        backend.set_int("i", 5)
        backend.set_long("l", 5)
        backend.set_string_set("s", set())
        backend.flush()

        reloaded = FileBackend(name="shapes", directory=tmp_dir)
        assert reloaded.entries() == {
            "i": (ValueType.INT, 5),
            "l": (ValueType.LONG, 5),
            "s": (ValueType.STRING_SET, frozenset()),
        }

    def test_set_without_read_preserves_existing(self, tmp_dir):
        first = FileBackend(name="keep", directory=tmp_dir)
        first.set_string("existing", "value")
        first.flush()

        second = FileBackend(name="keep", directory=tmp_dir)
        second.set_string("new", "value")  # auto-loads
        second.flush()

        assert FileBackend(name="keep", directory=tmp_dir).get_all() == {
            "existing": "value",
            "new": "value",
        }

    def test_atomic_write(self, tmp_dir):
        backend = FileBackend(name="atomic", directory=tmp_dir)
        backend.set_boolean("b", True)
        backend.flush()
        assert not os.path.exists(backend.get_path() + ".tmp")
        assert os.path.exists(backend.get_path())

    def test_creates_parent_directories(self, tmp_dir):
        fp = os.path.join(tmp_dir, "deep", "nested", "store.prefs")
        backend = FileBackend(file_path=fp)
        backend.set_string("k", "v")
        backend.flush()
        assert FileBackend(file_path=fp).get_string("k") == "v"

    def test_force_flush_writes_empty_store(self, tmp_dir):
        backend = FileBackend(name="init", directory=tmp_dir)
        backend.flush(force=True)
        with open(backend.get_path(), "rb") as f:
            assert f.read() == b""

    def test_corrupt_file_raises_backend_error(self, tmp_dir):
        fp = os.path.join(tmp_dir, "corrupt.prefs")
        with open(fp, "wb") as f:
            f.write(b"\x0a\xff\xff\xff")
        backend = FileBackend(file_path=fp)
        with pytest.raises(BackendError):
            backend.get_all()

    def test_reload_discards_unflushed_changes(self, tmp_dir):
        backend = FileBackend(name="reload", directory=tmp_dir)
        backend.set_string("k", "v")
        backend.reload()
        assert backend.contains("k") is False
