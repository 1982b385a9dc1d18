"""Protocol interfaces used by Scheduler."""

from __future__ import annotations

from typing import Any, Callable, Protocol


class Player(Protocol):
    def play(self, resource: Any, volume_percent: int) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerService(Protocol):
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...

