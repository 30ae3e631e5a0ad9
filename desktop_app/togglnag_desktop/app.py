"""Einstiegspunkt für die Desktop-Erinnerung."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QApplication

from .api_client import RemoteError
from .autostart import register_autostart
from .config import AppConfig, config_dir, load_config, save_config
from .controller import ConfigurationError, PartialFailure, ReminderController
from .models import SessionState
from .runtime import CoreRunner
from .scheduler import PollScheduler
from .widgets.prompt import DialogPrompt
from .widgets.status import StatusWindow
from .widgets.tray import create_tray_icon

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    log_dir = config_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=os.getenv("TOGGLNAG_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / "togglnag.log", encoding="utf-8"),
        ],
    )


class ReminderApp(QObject):
    """Verbindet die Qt-Widgets mit dem Controller auf dem Core-Loop."""

    state_changed = Signal(object)
    action_failed = Signal(str, str)

    def __init__(self, config: AppConfig, runner: CoreRunner, prompt: DialogPrompt,
                 parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.config = config
        self.runner = runner
        self.controller = ReminderController(prompt, mute_minutes=config.mute_duration_minutes)
        self.state = SessionState()
        self.state_changed.connect(self._remember_state)
        self.controller.add_listener(self.state_changed.emit)
        self.scheduler = PollScheduler(
            self.controller.perform_check,
            mute_window=self.controller.mute_window,
            on_progress=self.controller.publish_progress,
            interval_minutes=config.check_interval_minutes,
        )

    # ------------------------------------------------------------------
    # Core-Loop-Seite
    # ------------------------------------------------------------------
    async def _startup(self, api_token: Optional[str]) -> None:
        if api_token:
            await self.controller.configure(api_token, base_url=self.config.api_base_url)
        self.scheduler.start()

    def _report(self, title: str):
        def handler(exc: BaseException) -> None:
            if isinstance(exc, PartialFailure):
                logger.error("%s: %s", title, exc)
            else:
                logger.warning("%s: %s", title, exc)
            if isinstance(exc, (RemoteError, ConfigurationError)):
                self.action_failed.emit(title, str(exc))
            else:
                self.action_failed.emit(title, f"Unexpected error: {exc}")

        return handler

    def _remember_state(self, state: SessionState) -> None:
        self.state = state

    # ------------------------------------------------------------------
    # GUI-Seite
    # ------------------------------------------------------------------
    def start(self) -> None:
        self.runner.submit(self._startup(self.config.api_token), on_error=self._report("Startup failed"))

    def check_now(self) -> None:
        self.runner.submit(self.controller.perform_check(), on_error=self._report("Check failed"))

    def mute_now(self) -> None:
        self.runner.call(self.controller.mute_for, self.config.mute_duration_minutes)

    def change_task(self, description: str) -> None:
        self.runner.submit(self.controller.change_task(description),
                           on_error=self._report("Failed to switch task"))

    def start_task(self, description: str) -> None:
        self.runner.submit(self.controller.start_entry(description),
                           on_error=self._report("Failed to start timer"))

    def rename_task(self, description: str) -> None:
        self.runner.submit(self.controller.rename_task(description),
                           on_error=self._report("Failed to rename task"))

    def set_check_interval(self, minutes: int) -> None:
        self.config.check_interval_minutes = minutes
        save_config(self.config)
        self.runner.call(self.scheduler.set_interval, minutes)

    def set_mute_duration(self, minutes: int) -> None:
        self.config.mute_duration_minutes = minutes
        save_config(self.config)
        self.runner.call(self.controller.set_mute_minutes, minutes)

    def save_token(self, api_token: str) -> None:
        self.config.api_token = api_token
        save_config(self.config)
        self.runner.submit(self._startup(api_token), on_error=self._report("Login failed"))

    def logout(self) -> None:
        self.config.api_token = None
        save_config(self.config)
        self.runner.call(self.controller.logout)

    def shutdown(self) -> None:
        self.runner.call(self.scheduler.stop)
        self.runner.stop()


def main() -> None:
    """Startet die Qt-Anwendung."""

    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("TogglNag")
    app.setQuitOnLastWindowClosed(False)
    config = load_config()
    register_autostart()

    runner = CoreRunner()
    runner.start()
    prompt = DialogPrompt()
    reminder = ReminderApp(config, runner, prompt)

    window = StatusWindow(reminder)
    reminder.state_changed.connect(window.apply_state)
    reminder.action_failed.connect(window.show_error)
    tray_icon = create_tray_icon(app, window=window, reminder=reminder)
    tray_icon.show()
    app.aboutToQuit.connect(reminder.shutdown)

    reminder.start()
    logger.info("TogglNag started, checking every %s min", config.check_interval_minutes)
    sys.exit(app.exec())


__all__ = ["main", "ReminderApp"]
