"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

FREQUENCY_RANGE = (0, 60)
VOLUME_RANGE = (0, 100)
DEFAULT_FREQUENCY_MINUTES = 5
DEFAULT_VOLUME_PERCENT = 20
PLAY_LOG_LIMIT = 50


class RunState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"


@dataclass(frozen=True)
class SoundDescriptor:
    id: str
    name: str
    resource: Any = None


@dataclass(frozen=True)
class Settings:
    frequency_minutes: int = DEFAULT_FREQUENCY_MINUTES
    volume_percent: int = DEFAULT_VOLUME_PERCENT


@dataclass(frozen=True)
class PendingPlay:
    fire_at_epoch_ms: int


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    sound_name: str


def clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, int(value)))
