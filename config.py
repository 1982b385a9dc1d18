"""Simple JSON-based config store."""

from __future__ import annotations

import json
from pathlib import Path

DEFAULT_SOUNDS_DIR = "sounds"
DEFAULT_HOTKEY = "Key.f9"
DEFAULT_LOG_LEVEL = "INFO"


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "ads" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_sounds_dir(self) -> str:
        data = self._read_all()
        return str(data.get("sounds_dir", DEFAULT_SOUNDS_DIR))

    def set_sounds_dir(self, path: str) -> None:
        data = self._read_all()
        data["sounds_dir"] = path
        self._write_all(data)

    def get_hotkey(self) -> str:
        data = self._read_all()
        return str(data.get("hotkey", DEFAULT_HOTKEY))

    def set_hotkey(self, hotkey: str) -> None:
        data = self._read_all()
        data["hotkey"] = hotkey
        self._write_all(data)

    def get_log_level(self) -> str:
        data = self._read_all()
        return str(data.get("log_level", DEFAULT_LOG_LEVEL)).upper()

    def get_sound_entries(self) -> list[dict]:
        """Catalog override: ``[{"id": ..., "name": ..., "file": ...}]``."""
        entries = self._read_all().get("sounds")
        if not isinstance(entries, list):
            return []
        return [entry for entry in entries if isinstance(entry, dict)]

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
