"""Static sound catalog."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from models import SoundDescriptor

logger = logging.getLogger("ads.catalog")

# (id, display name, file name). Three entries share id "E": selecting "E"
# enables all of them, but scheduled play only ever picks the first one.
DEFAULT_SOUNDS = (
    ("A", "客艙服務鈴", "sound-a.mp3"),
    ("B", "安全帶", "sound-b.mp3"),
    ("C", "簡訊聲", "sound-c.mp3"),
    ("D", "LINE聲響 1", "sound-d.mp3"),
    ("E", "LINE聲響 2", "sound-e.mp3"),
    ("E", "LINE聲響 3", "sound-f.mp3"),
    ("E", "LINE聲響 4", "sound-g.mp3"),
)


def build_catalog(
    sounds_dir: str | Path,
    entries: Optional[Iterable[dict]] = None,
) -> tuple[SoundDescriptor, ...]:
    """Build descriptors whose resources are audio file paths under ``sounds_dir``.

    ``entries`` overrides the default list; each entry needs ``id``, ``name``
    and ``file`` keys. Incomplete entries are skipped.
    """
    base = Path(sounds_dir).expanduser()
    rows: list[tuple[str, str, str]] = []
    if entries:
        for entry in entries:
            try:
                rows.append((str(entry["id"]), str(entry["name"]), str(entry["file"])))
            except KeyError as exc:
                logger.warning("Skipping catalog entry %r: missing %s", entry, exc)
    if not rows:
        rows = list(DEFAULT_SOUNDS)

    catalog = tuple(
        SoundDescriptor(id=sound_id, name=name, resource=base / file_name)
        for sound_id, name, file_name in rows
    )
    _warn_duplicate_ids(catalog)
    return catalog


def find_sound(catalog: Iterable[SoundDescriptor], sound_id: str) -> Optional[SoundDescriptor]:
    """Return the first descriptor with ``sound_id``."""
    for sound in catalog:
        if sound.id == sound_id:
            return sound
    return None


def _warn_duplicate_ids(catalog: tuple[SoundDescriptor, ...]) -> None:
    seen: dict[str, str] = {}
    for sound in catalog:
        if sound.id in seen:
            logger.warning(
                "Duplicate sound id %r: %r shadowed by %r", sound.id, sound.name, seen[sound.id]
            )
        else:
            seen[sound.id] = sound.name
