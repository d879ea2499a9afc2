from shared_preferences.common.values import (
    PreferenceConversionError,
    PreferencesError,
    UnsupportedValueError,
    ValueType,
)
from shared_preferences.preferences.editor import Editor
from shared_preferences.preferences.factory import get_preferences, reset_preferences
from shared_preferences.preferences.listeners import (
    ListenerRegistry,
    OnPreferenceChangeListener,
)
from shared_preferences.preferences.preferences import Preferences

__all__ = [
    "Editor",
    "ListenerRegistry",
    "OnPreferenceChangeListener",
    "PreferenceConversionError",
    "Preferences",
    "PreferencesError",
    "UnsupportedValueError",
    "ValueType",
    "get_preferences",
    "reset_preferences",
]
