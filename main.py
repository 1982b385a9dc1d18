"""Application entrypoint."""

from __future__ import annotations

import sys

from catalog import build_catalog
from config import JsonConfigStore
from control_panel import ControlPanel
from errors import ERROR_MESSAGES, HOTKEY_UNAVAILABLE
from hotkey import GlobalHotkeyAdapter
from logging_config import setup_logging
from models import LogEntry, PendingPlay, RunState
from player import SoundDevicePlayer
from scheduler import Scheduler
from timers import QtTimerService

try:
    from PySide6.QtCore import QObject, QSize, Qt, Signal
    from PySide6.QtGui import QAction, QBrush, QColor, QIcon, QPainter, QPixmap
    from PySide6.QtWidgets import QApplication, QFileDialog, QMenu, QMessageBox, QSystemTrayIcon
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")


def _create_icon(color: str = "#888888", size: int = 22) -> QIcon:
    """Generate a simple circular tray icon with the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))  # transparent background
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


ICON_IDLE = "#888888"     # grey
ICON_RUNNING = "#2E7D32"  # green


class UIBridge(QObject):
    state_signal = Signal(str, str)  # from_state, to_state
    log_signal = Signal(object)
    error_signal = Signal(str, str)
    toggle_signal = Signal()


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.config_store = JsonConfigStore()
        self.logger = setup_logging(self.config_store.get_log_level())

        self.ui = UIBridge()
        self.ui.state_signal.connect(self._on_state_change_ui)
        self.ui.log_signal.connect(self._on_log_ui)
        # Queued so the notice dialog never runs inside a scheduler call.
        self.ui.error_signal.connect(self._on_error_ui, Qt.QueuedConnection)

        self.player = SoundDevicePlayer()
        self.scheduler = Scheduler(
            catalog=self._load_catalog(),
            player=self.player,
            timer_service=QtTimerService(),
            on_state_change=self._on_state_change,
            on_log_change=self._on_log_change,
            on_error=self._on_error,
            on_schedule=self._on_schedule,
        )
        self.panel = ControlPanel(self.scheduler)
        self.ui.toggle_signal.connect(self.scheduler.toggle_run)
        self.hotkey = GlobalHotkeyAdapter(hotkey_name=self.config_store.get_hotkey())

        self.tray = QSystemTrayIcon()
        self.tray.setIcon(_create_icon(ICON_IDLE))
        self.tray.setToolTip("AdS - Ready")
        self._setup_menu()
        self.tray.show()

    def _load_catalog(self):
        return build_catalog(
            self.config_store.get_sounds_dir(),
            self.config_store.get_sound_entries(),
        )

    def _setup_menu(self) -> None:
        menu = QMenu()

        show_action = QAction("Show Panel", menu)
        show_action.triggered.connect(self._show_panel)
        menu.addAction(show_action)

        self.run_action = QAction("START", menu)
        self.run_action.triggered.connect(lambda _checked=False: self.scheduler.toggle_run())
        menu.addAction(self.run_action)

        folder_action = QAction("Set Sounds Folder", menu)
        folder_action.triggered.connect(self._set_sounds_dir)
        menu.addAction(folder_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

        self.tray.setContextMenu(menu)

    def _show_panel(self) -> None:
        self.panel.show()
        self.panel.raise_()
        self.panel.activateWindow()

    def _set_sounds_dir(self) -> None:
        value = QFileDialog.getExistingDirectory(None, "Sounds Folder", self.config_store.get_sounds_dir())
        if not value:
            return
        self.config_store.set_sounds_dir(value)
        QMessageBox.information(None, "Saved", "Sounds folder saved. Restart app to apply.")

    # ------------------------------------------------------------------
    # Scheduler callbacks (emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_state_change(self, from_state: RunState, to_state: RunState) -> None:
        self.ui.state_signal.emit(from_state.value, to_state.value)

    def _on_log_change(self, entries: tuple[LogEntry, ...]) -> None:
        self.ui.log_signal.emit(entries)

    def _on_error(self, code: str, message: str) -> None:
        self.ui.error_signal.emit(code, message)

    def _on_schedule(self, pending: PendingPlay | None) -> None:
        if pending is None:
            self.logger.debug("No play pending")
        else:
            self.logger.debug("Next play at epoch ms %d", pending.fire_at_epoch_ms)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_state_change_ui(self, from_state: str, to_state: str) -> None:
        running = to_state == RunState.RUNNING.value
        self.panel.set_run_state(RunState(to_state))
        self.run_action.setText("STOP" if running else "START")
        self.tray.setIcon(_create_icon(ICON_RUNNING if running else ICON_IDLE))
        self.tray.setToolTip("AdS - Running" if running else "AdS - Ready")

    def _on_log_ui(self, entries: tuple[LogEntry, ...]) -> None:
        self.panel.set_log(entries)

    def _on_error_ui(self, code: str, message: str) -> None:
        self.logger.warning("%s: %s", code, message)
        self.panel.show_notice(message)

    # ------------------------------------------------------------------
    # Hotkey handler (pynput thread)
    # ------------------------------------------------------------------

    def _on_hotkey(self) -> None:
        self.ui.toggle_signal.emit()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        try:
            self.hotkey.start(on_trigger=self._on_hotkey)
        except Exception as exc:
            self.logger.warning("%s: %s", HOTKEY_UNAVAILABLE, exc)
            self.tray.showMessage("AdS", ERROR_MESSAGES[HOTKEY_UNAVAILABLE])
        self._show_panel()
        return self.app.exec()

    def quit(self) -> None:
        self.hotkey.stop()
        self.scheduler.stop()
        self.player.stop()
        self.app.quit()


def main() -> int:
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
