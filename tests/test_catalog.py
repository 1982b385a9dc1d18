from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from catalog import DEFAULT_SOUNDS, build_catalog, find_sound


def test_default_catalog_resolves_files_under_sounds_dir(tmp_path: Path) -> None:
    catalog = build_catalog(tmp_path)

    assert len(catalog) == len(DEFAULT_SOUNDS) == 7
    assert catalog[0].id == "A"
    assert catalog[0].resource == tmp_path / "sound-a.mp3"
    assert [s.id for s in catalog].count("E") == 3


def test_duplicate_ids_are_reported(tmp_path: Path) -> None:
    with patch("catalog.logger") as mock_logger:
        build_catalog(tmp_path)

    assert mock_logger.warning.call_count == 2
    assert all(call.args[1] == "E" for call in mock_logger.warning.call_args_list)


def test_find_sound_returns_first_match(tmp_path: Path) -> None:
    catalog = build_catalog(tmp_path)

    sound = find_sound(catalog, "E")

    assert sound is not None
    assert sound.name == "LINE聲響 2"
    assert find_sound(catalog, "Z") is None


def test_entries_override_defaults(tmp_path: Path) -> None:
    catalog = build_catalog(
        tmp_path,
        [
            {"id": "x", "name": "Gong", "file": "gong.wav"},
            {"id": "y", "name": "Clap"},  # missing file, skipped
        ],
    )

    assert len(catalog) == 1
    assert catalog[0].name == "Gong"
    assert catalog[0].resource == tmp_path / "gong.wav"


def test_all_invalid_entries_fall_back_to_defaults(tmp_path: Path) -> None:
    catalog = build_catalog(tmp_path, [{"name": "nameless"}])

    assert len(catalog) == len(DEFAULT_SOUNDS)
