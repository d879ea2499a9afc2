import os
import sys
import tempfile
from pathlib import Path

# Ensure the repo root is on sys.path when running as a script.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from shared_preferences.backends import FileBackend, MemoryBackend
from shared_preferences.preferences import PreferenceConversionError, Preferences, get_preferences


class ThemeWatcher:
    """Re-reads the theme whenever it changes."""

    def __init__(self):
        self.theme = None

    def on_preference_changed(self, preferences, key):
        print(f"[listener] {preferences.name}: {key} changed")
        if key == "theme":
            self.theme = preferences.get_string("theme", "system")


def main() -> int:
    directory = os.path.join(tempfile.gettempdir(), f"shared-preferences-demo-{os.getpid()}")

    # ===== File-backed store =====
    prefs = Preferences(FileBackend(name="demo", directory=directory))
    print("[file] path:", prefs.backend.get_path())

    watcher = ThemeWatcher()
    prefs.register_listener(watcher.on_preference_changed)

    ok = (
        prefs.edit()
        .put_string("theme", "dark")
        .put_int("launches", 1)
        .put_long("installed_at", 1_700_000_000_000)
        .put_float("font_scale", 1.25)
        .put_boolean("onboarded", True)
        .put_string_set("recent", {"a.txt", "b.txt"})
        .commit()
    )
    print("[file] commit:", ok, "theme seen by listener:", watcher.theme)
    print("[file] all:", prefs.get_all())

    with prefs.edit() as editor:
        editor.put_int("launches", prefs.get_int("launches") + 1)
        editor.remove("recent")
    print("[file] launches:", prefs.get_int("launches"), "recent:", prefs.get_string_set("recent"))

    try:
        prefs.get_string_set("theme")
    except PreferenceConversionError as e:
        print("[file] conversion error:", e)

    reloaded = Preferences(FileBackend(name="demo", directory=directory))
    print("[file] reloaded:", reloaded.get_all())

    # ===== clear() together with a put =====
    prefs.edit().clear().put_string("theme", "light").apply()
    print("[file] after clear:", prefs.get_all())
    prefs.unregister_listener(watcher.on_preference_changed)

    # ===== Memory store through the per-name factory =====
    session = get_preferences("session", backend=MemoryBackend(name="session"))
    session.edit().put("token_ttl", 3600).commit()
    print("[memory] same instance:", session is get_preferences("session"))
    print("[memory] token_ttl:", session.get_int("token_ttl"))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
