"""Typed key-value preferences with transactional editors and change listeners."""

from shared_preferences.preferences import (
    Editor,
    PreferenceConversionError,
    Preferences,
    PreferencesError,
    UnsupportedValueError,
    ValueType,
    get_preferences,
    reset_preferences,
)

__all__ = [
    "Editor",
    "PreferenceConversionError",
    "Preferences",
    "PreferencesError",
    "UnsupportedValueError",
    "ValueType",
    "get_preferences",
    "reset_preferences",
]
