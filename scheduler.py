"""State-machine based randomized playback scheduling."""

from __future__ import annotations

import logging
import random
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from catalog import find_sound
from errors import ERROR_MESSAGES, NO_SOUND_SELECTED
from interfaces import Player, TimerHandle, TimerService
from models import (
    FREQUENCY_RANGE,
    PLAY_LOG_LIMIT,
    VOLUME_RANGE,
    LogEntry,
    PendingPlay,
    RunState,
    Settings,
    SoundDescriptor,
    clamp,
)

logger = logging.getLogger("ads.scheduler")

LOG_TIMEZONE = timezone(timedelta(hours=8))
LOG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

StateCallback = Callable[[RunState, RunState], None]
LogCallback = Callable[[tuple[LogEntry, ...]], None]
ErrorCallback = Callable[[str, str], None]
ScheduleCallback = Callable[[Optional[PendingPlay]], None]


def format_log_timestamp(moment: datetime) -> str:
    """Render ``moment`` in fixed UTC+8, independent of the local timezone."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(LOG_TIMEZONE).strftime(LOG_TIMESTAMP_FORMAT)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_ms() -> int:
    return int(time.time() * 1000)


class Scheduler:
    def __init__(
        self,
        catalog: Iterable[SoundDescriptor],
        player: Player,
        timer_service: TimerService,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utc_now,
        epoch_ms: Callable[[], int] = now_ms,
        on_state_change: Optional[StateCallback] = None,
        on_log_change: Optional[LogCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        on_schedule: Optional[ScheduleCallback] = None,
    ) -> None:
        self._catalog = tuple(catalog)
        self._player = player
        self._timer_service = timer_service
        self._rng = rng or random.Random()
        self._clock = clock
        self._epoch_ms = epoch_ms
        self._on_state_change = on_state_change
        self._on_log_change = on_log_change
        self._on_error = on_error
        self._on_schedule = on_schedule

        self._lock = threading.RLock()
        self._state = RunState.IDLE
        # Toggle order; the random choice indexes into it.
        self._selection: list[str] = []
        self._settings = Settings()
        self._play_log: list[LogEntry] = []
        self._timer: Optional[TimerHandle] = None
        self._pending: Optional[PendingPlay] = None
        self._generation = 0

    @property
    def catalog(self) -> tuple[SoundDescriptor, ...]:
        return self._catalog

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def selection(self) -> frozenset[str]:
        return frozenset(self._selection)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def play_log(self) -> tuple[LogEntry, ...]:
        return tuple(self._play_log)

    @property
    def pending_play(self) -> Optional[PendingPlay]:
        return self._pending

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_sound(self, sound_id: str) -> None:
        with self._lock:
            if sound_id in self._selection:
                self._selection.remove(sound_id)
            else:
                self._selection.append(sound_id)
            self._rearm_if_running()

    def reset_selection(self) -> None:
        with self._lock:
            self._selection = []
            self._rearm_if_running()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_frequency(self, minutes: int) -> None:
        with self._lock:
            self._apply_settings(
                Settings(
                    frequency_minutes=clamp(minutes, FREQUENCY_RANGE),
                    volume_percent=self._settings.volume_percent,
                )
            )

    def set_volume(self, percent: int) -> None:
        with self._lock:
            self._apply_settings(
                Settings(
                    frequency_minutes=self._settings.frequency_minutes,
                    volume_percent=clamp(percent, VOLUME_RANGE),
                )
            )

    def reset_settings(self) -> None:
        with self._lock:
            self._apply_settings(Settings())

    def _apply_settings(self, settings: Settings) -> None:
        # Unchanged values keep the pending delay.
        if settings == self._settings:
            return
        self._settings = settings
        self._rearm_if_running()

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def test_play(self, sound_id: str) -> None:
        """Play the first catalog entry with ``sound_id``; never logged."""
        with self._lock:
            sound = find_sound(self._catalog, sound_id)
            if sound is None:
                logger.warning("Test play of unknown sound %r ignored", sound_id)
                return
            self._safe_play(sound)

    def test_play_sound(self, sound: SoundDescriptor) -> None:
        """Play exactly ``sound`` (a catalog row) at the current volume; never logged."""
        with self._lock:
            self._safe_play(sound)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Enter RUNNING and arm the first play.

        Returns ``False`` (after emitting ``NO_SOUND_SELECTED``) when nothing
        is selected.
        """
        with self._lock:
            if self._state == RunState.RUNNING:
                return True
            if not self._selection:
                self._emit_error(NO_SOUND_SELECTED, ERROR_MESSAGES[NO_SOUND_SELECTED])
                return False
            self._transition(RunState.RUNNING)
            self._arm()
            return True

    def stop(self) -> None:
        with self._lock:
            if self._state == RunState.IDLE:
                return
            self._cancel_timer()
            self._transition(RunState.IDLE)
            self._play_log = []
            self._emit_log()

    def toggle_run(self) -> bool:
        """Mirror the single START/STOP control; returns whether it is running."""
        with self._lock:
            if self._state == RunState.RUNNING:
                self.stop()
                return False
            return self.start()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _rearm_if_running(self) -> None:
        if self._state == RunState.RUNNING:
            self._arm()

    def _arm(self) -> None:
        self._cancel_timer()
        if not self._selection:
            return
        delay_ms = self._rng.random() * self._settings.frequency_minutes * 60_000
        self._generation += 1
        generation = self._generation
        self._pending = PendingPlay(fire_at_epoch_ms=self._epoch_ms() + int(delay_ms))
        self._timer = self._timer_service.call_later(delay_ms, lambda: self._fire(generation))
        logger.debug("Next play armed in %.0f ms", delay_ms)
        self._emit_schedule()

    def _cancel_timer(self) -> None:
        timer = self._timer
        self._timer = None
        had_pending = self._pending is not None
        self._pending = None
        if timer is not None:
            timer.cancel()
        if had_pending:
            self._emit_schedule()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if self._state != RunState.RUNNING or generation != self._generation:
                return
            if self._selection:
                index = int(self._rng.random() * len(self._selection))
                sound = find_sound(self._catalog, self._selection[index])
                if sound is not None:
                    self._safe_play(sound)
                    self._record(sound)
                else:
                    logger.warning("Selected sound %r is not in the catalog", self._selection[index])
            if self._state == RunState.RUNNING:
                self._arm()

    def _record(self, sound: SoundDescriptor) -> None:
        entry = LogEntry(timestamp=format_log_timestamp(self._clock()), sound_name=sound.name)
        self._play_log = [entry, *self._play_log][:PLAY_LOG_LIMIT]
        logger.info("Played %s at %s", sound.name, entry.timestamp)
        self._emit_log()

    def _safe_play(self, sound: SoundDescriptor) -> None:
        try:
            self._player.play(sound.resource, self._settings.volume_percent)
        except Exception:
            logger.exception("Player failed for %s", sound.name)

    def _emit_error(self, code: str, message: str) -> None:
        logger.info("%s: %s", code, message)
        if self._on_error:
            self._on_error(code, message)

    def _emit_log(self) -> None:
        if self._on_log_change:
            self._on_log_change(tuple(self._play_log))

    def _emit_schedule(self) -> None:
        if self._on_schedule:
            self._on_schedule(self._pending)

    def _transition(self, to_state: RunState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        logger.info("Scheduler %s -> %s", from_state.value, to_state.value)
        if self._on_state_change:
            self._on_state_change(from_state, to_state)
