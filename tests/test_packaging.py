from __future__ import annotations

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _load() -> dict:
    return tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))


def test_flat_modules_are_not_installed_into_site_packages() -> None:
    data = _load()

    assert data["tool"]["setuptools"]["py-modules"] == []
    assert "scripts" not in data["project"]


def test_audio_stack_is_declared() -> None:
    names = {dep.split(">")[0].split("=")[0].strip().lower() for dep in _load()["project"]["dependencies"]}

    assert {"pyside6", "numpy", "sounddevice", "soundfile", "pynput"} <= names
