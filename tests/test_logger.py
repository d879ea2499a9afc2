import logging

import pytest

from shared_preferences.backends import MemoryBackend
from shared_preferences.common import logger as prefs_logger
from shared_preferences.common.logger import PACKAGE_LOGGER_NAME, get_logger, level_from_env
from shared_preferences.preferences import Preferences


# ---------- fixtures ----------

@pytest.fixture
def unconfigured(monkeypatch):
    """Run get_logger as if for the first time, restoring the package logger after."""
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    level, handlers = package_logger.level, list(package_logger.handlers)
    monkeypatch.setattr(prefs_logger, "_configured", False)
    yield package_logger
    package_logger.setLevel(level)
    package_logger.handlers[:] = handlers


# ============================================================
# Names and levels
# ============================================================

class TestGetLogger:
    def test_package_module_names_are_kept(self):
        assert get_logger("shared_preferences.preferences.editor").name == (
            "shared_preferences.preferences.editor"
        )

    def test_other_names_nest_under_package(self):
        assert get_logger("demo").name == "shared_preferences.demo"
        assert get_logger().name == PACKAGE_LOGGER_NAME

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, logging.INFO),
            ("debug", logging.DEBUG),
            (" WARNING ", logging.WARNING),
            ("loud", logging.INFO),
        ],
    )
    def test_level_from_env(self, monkeypatch, raw, expected):
        if raw is None:
            monkeypatch.delenv("LOG_LEVEL", raising=False)
        else:
            monkeypatch.setenv("LOG_LEVEL", raw)
        assert level_from_env() == expected

    def test_first_use_applies_env_level(self, unconfigured, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        get_logger(__name__)
        assert unconfigured.level == logging.ERROR

    def test_later_level_changes_are_kept(self, unconfigured):
        get_logger()
        unconfigured.setLevel(logging.CRITICAL)
        get_logger()
        assert unconfigured.level == logging.CRITICAL


# ============================================================
# Handlers
# ============================================================

class TestHandlers:
    def test_root_logger_is_left_alone(self, unconfigured):
        root = logging.getLogger()
        level, handlers = root.level, list(root.handlers)
        get_logger()
        assert root.level == level
        assert root.handlers == handlers

    def test_no_handler_added_when_host_configured_logging(self, unconfigured):
        unconfigured.handlers[:] = []
        root = logging.getLogger()
        host_handler = logging.NullHandler()
        root.addHandler(host_handler)
        try:
            get_logger()
        finally:
            root.removeHandler(host_handler)
        assert unconfigured.handlers == []

    def test_stream_handler_when_nothing_configured(self, unconfigured):
        unconfigured.handlers[:] = []
        root = logging.getLogger()
        saved = list(root.handlers)
        root.handlers.clear()
        try:
            get_logger()
        finally:
            root.handlers[:] = saved
        assert len(unconfigured.handlers) == 1
        assert isinstance(unconfigured.handlers[0], logging.StreamHandler)

    def test_commit_records_propagate(self, caplog):
        prefs = Preferences(MemoryBackend(name="logged"))
        with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER_NAME):
            prefs.edit().put_int("a", 1).commit()
        assert "editor: applied store=logged key=a" in caplog.text
