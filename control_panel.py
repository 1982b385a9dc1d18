"""Control panel window: sounds, settings, START/STOP and play log."""

from __future__ import annotations

from typing import Iterable

from models import FREQUENCY_RANGE, VOLUME_RANGE, LogEntry, RunState
from scheduler import Scheduler

try:
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import (
        QCheckBox,
        QGridLayout,
        QGroupBox,
        QLabel,
        QListWidget,
        QMessageBox,
        QPushButton,
        QSlider,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QCheckBox = object  # type: ignore
    QGridLayout = object  # type: ignore
    QGroupBox = object  # type: ignore
    QLabel = object  # type: ignore
    QListWidget = object  # type: ignore
    QMessageBox = None  # type: ignore
    QPushButton = object  # type: ignore
    QSlider = object  # type: ignore
    QVBoxLayout = object  # type: ignore
    QWidget = object  # type: ignore

EMPTY_LOG_TEXT = "No sounds played yet..."

START_STYLE = "font-size: 20px; font-weight: bold; padding: 12px; background: #2e7d32; color: white;"
STOP_STYLE = "font-size: 20px; font-weight: bold; padding: 12px; background: #c62828; color: white;"


class ControlPanel(QWidget):
    def __init__(self, scheduler: Scheduler) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self._scheduler = scheduler
        self.setWindowTitle("AdS - Aufmerksamkeit der Schüler")
        self.setMinimumWidth(420)

        self._checkboxes: list[tuple[str, QCheckBox]] = []

        layout = QVBoxLayout()
        title = QLabel("<h1>AdS</h1><h3>Aufmerksamkeit der Schüler</h3>")
        title.setAlignment(Qt.AlignCenter)
        layout.addWidget(title)
        layout.addWidget(self._build_sounds_group())
        layout.addWidget(self._build_settings_group())

        self._run_button = QPushButton()
        self._run_button.clicked.connect(self._on_run_clicked)
        layout.addWidget(self._run_button)

        layout.addWidget(QLabel("Play Log (UTC+8)"))
        self._log_list = QListWidget()
        layout.addWidget(self._log_list)
        self.setLayout(layout)

        self.sync_selection()
        self.sync_settings()
        self.set_run_state(scheduler.state)
        self.set_log(scheduler.play_log)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_sounds_group(self) -> QGroupBox:
        group = QGroupBox("Sounds")
        grid = QGridLayout()
        reset = QPushButton("Reset")
        reset.clicked.connect(self._on_reset_sounds)
        grid.addWidget(reset, 0, 2)

        for row, sound in enumerate(self._scheduler.catalog, start=1):
            checkbox = QCheckBox()
            checkbox.clicked.connect(lambda _checked=False, sid=sound.id: self._on_sound_clicked(sid))
            test = QPushButton("TEST")
            test.clicked.connect(lambda _checked=False, row=sound: self._scheduler.test_play_sound(row))
            grid.addWidget(checkbox, row, 0)
            grid.addWidget(QLabel(sound.name), row, 1)
            grid.addWidget(test, row, 2)
            self._checkboxes.append((sound.id, checkbox))

        group.setLayout(grid)
        return group

    def _build_settings_group(self) -> QGroupBox:
        group = QGroupBox("Settings")
        grid = QGridLayout()
        reset = QPushButton("Reset")
        reset.clicked.connect(self._on_reset_settings)
        grid.addWidget(reset, 0, 2)

        self._frequency_slider, self._frequency_label = self._slider(FREQUENCY_RANGE)
        self._frequency_slider.valueChanged.connect(self._on_frequency_changed)
        grid.addWidget(QLabel("Frequency"), 1, 0)
        grid.addWidget(self._frequency_slider, 1, 1)
        grid.addWidget(self._frequency_label, 1, 2)

        self._volume_slider, self._volume_label = self._slider(VOLUME_RANGE)
        self._volume_slider.valueChanged.connect(self._on_volume_changed)
        grid.addWidget(QLabel("Volume"), 2, 0)
        grid.addWidget(self._volume_slider, 2, 1)
        grid.addWidget(self._volume_label, 2, 2)

        group.setLayout(grid)
        return group

    @staticmethod
    def _slider(bounds: tuple[int, int]) -> tuple[QSlider, QLabel]:
        slider = QSlider(Qt.Horizontal)
        slider.setRange(*bounds)
        return slider, QLabel("")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def sync_selection(self) -> None:
        selection = self._scheduler.selection
        for sound_id, checkbox in self._checkboxes:
            checkbox.setChecked(sound_id in selection)

    def sync_settings(self) -> None:
        settings = self._scheduler.settings
        for slider, value in (
            (self._frequency_slider, settings.frequency_minutes),
            (self._volume_slider, settings.volume_percent),
        ):
            slider.blockSignals(True)
            slider.setValue(value)
            slider.blockSignals(False)
        self._frequency_label.setText(f"{settings.frequency_minutes} min")
        self._volume_label.setText(f"{settings.volume_percent} %")

    def set_run_state(self, state: RunState) -> None:
        running = state == RunState.RUNNING
        self._run_button.setText("STOP" if running else "START")
        self._run_button.setStyleSheet(STOP_STYLE if running else START_STYLE)

    def set_log(self, entries: Iterable[LogEntry]) -> None:
        self._log_list.clear()
        lines = [f"{entry.timestamp}    {entry.sound_name}" for entry in entries]
        self._log_list.addItems(lines or [EMPTY_LOG_TEXT])

    def show_notice(self, message: str) -> None:
        QMessageBox.warning(self, "AdS", message)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _on_sound_clicked(self, sound_id: str) -> None:
        self._scheduler.toggle_sound(sound_id)
        # Entries sharing an id mirror each other.
        self.sync_selection()

    def _on_reset_sounds(self) -> None:
        self._scheduler.reset_selection()
        self.sync_selection()

    def _on_reset_settings(self) -> None:
        self._scheduler.reset_settings()
        self.sync_settings()

    def _on_frequency_changed(self, value: int) -> None:
        self._scheduler.set_frequency(value)
        self.sync_settings()

    def _on_volume_changed(self, value: int) -> None:
        self._scheduler.set_volume(value)
        self.sync_settings()

    def _on_run_clicked(self) -> None:
        self._scheduler.toggle_run()
