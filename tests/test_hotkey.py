from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

import hotkey
from hotkey import GlobalHotkeyAdapter


class _Key:
    def __init__(self, name: str) -> None:
        self._name = name

    def __str__(self) -> str:
        return self._name


@patch("hotkey.keyboard")
def test_press_triggers_once_until_release(mock_keyboard: MagicMock) -> None:
    triggers: list[int] = []
    adapter = GlobalHotkeyAdapter(hotkey_name="Key.f9")

    adapter.start(on_trigger=lambda: triggers.append(1))
    kwargs = mock_keyboard.Listener.call_args.kwargs
    on_press, on_release = kwargs["on_press"], kwargs["on_release"]

    on_press(_Key("Key.f9"))
    on_press(_Key("Key.f9"))  # auto-repeat
    assert len(triggers) == 1

    on_release(_Key("Key.f9"))
    on_press(_Key("Key.f9"))
    assert len(triggers) == 2

    on_press(_Key("Key.f10"))
    assert len(triggers) == 2

    adapter.stop()
    mock_keyboard.Listener.return_value.stop.assert_called_once()


def test_start_without_pynput_raises(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(hotkey, "keyboard", None)

    with pytest.raises(RuntimeError):
        GlobalHotkeyAdapter().start(on_trigger=lambda: None)


def test_stop_before_start_is_noop() -> None:
    GlobalHotkeyAdapter().stop()
