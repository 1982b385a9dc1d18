"""One-shot timer services used to arm scheduled plays."""

from __future__ import annotations

import threading
from typing import Callable

try:
    from PySide6.QtCore import QTimer
except Exception:  # pragma: no cover
    QTimer = None  # type: ignore


class ThreadingTimerHandle:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingTimerService:
    """Runs callbacks on a daemon ``threading.Timer`` thread."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ThreadingTimerHandle:
        timer = threading.Timer(max(0.0, delay_ms) / 1000.0, callback)
        timer.daemon = True
        timer.start()
        return ThreadingTimerHandle(timer)


class QtTimerHandle:
    def __init__(self, timer: "QTimer", on_cancel: Callable[[], None]) -> None:
        self._timer = timer
        self._on_cancel = on_cancel

    def cancel(self) -> None:
        self._timer.stop()
        self._on_cancel()


class QtTimerService:
    """Runs callbacks on the Qt event loop via single-shot ``QTimer``s.

    Must be used from the thread that owns the event loop.
    """

    def __init__(self) -> None:
        if QTimer is None:
            raise RuntimeError("PySide6 is not installed")
        self._active: set[QTimer] = set()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer()
        timer.setSingleShot(True)

        def _fire() -> None:
            self._active.discard(timer)
            callback()

        timer.timeout.connect(_fire)
        # QTimer takes an int in milliseconds; keep references alive until fired.
        self._active.add(timer)
        timer.start(max(0, int(delay_ms)))
        return QtTimerHandle(timer, lambda: self._active.discard(timer))
