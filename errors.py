"""Shared error codes and user-facing messages."""

from __future__ import annotations

NO_SOUND_SELECTED = "NO_SOUND_SELECTED"
PLAYBACK_FAILED = "PLAYBACK_FAILED"
HOTKEY_UNAVAILABLE = "HOTKEY_UNAVAILABLE"

ERROR_MESSAGES = {
    NO_SOUND_SELECTED: "Bitte wählen Sie mindestens einen Sound aus!",
    PLAYBACK_FAILED: "Sound could not be played.",
    HOTKEY_UNAVAILABLE: "Global hotkey is disabled.",
}
