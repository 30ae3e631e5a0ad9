"""System-Tray-Integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QIcon, QPixmap
from PySide6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from ..models import SessionState

if TYPE_CHECKING:
    from ..app import ReminderApp
    from .status import StatusWindow


def _load_icon() -> QIcon:
    icon = QIcon.fromTheme("appointment-soon")
    if not icon.isNull():
        return icon
    pixmap = QPixmap(32, 32)
    pixmap.fill(Qt.red)
    return QIcon(pixmap)


def create_tray_icon(app: QApplication, *, window: "StatusWindow",
                     reminder: "ReminderApp") -> QSystemTrayIcon:
    """Erzeugt das System-Tray-Icon mit Menü."""

    tray_icon = QSystemTrayIcon(_load_icon(), parent=window)
    tray_icon.setToolTip("TogglNag")

    menu = QMenu(window)

    status_action = QAction("No timer", menu)
    status_action.setEnabled(False)
    check_action = QAction("Check now", menu)
    mute_action = QAction("Mute", menu)
    open_action = QAction("Open window", menu)
    quit_action = QAction("Quit", menu)

    def handle_state(state: SessionState) -> None:
        if state.current_description:
            status_action.setText(f"Current: {state.current_description}")
        elif state.is_muted:
            status_action.setText("Muted")
        else:
            status_action.setText("No timer")
        tooltip = "TogglNag"
        if state.progress is not None:
            tooltip = f"TogglNag - {state.progress.label}"
        tray_icon.setToolTip(tooltip)
        mute_action.setText(f"Mute for {reminder.config.mute_duration_minutes} min")

    def handle_activated(reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.Trigger:
            window.show()
            window.raise_()

    check_action.triggered.connect(reminder.check_now)
    mute_action.triggered.connect(reminder.mute_now)
    open_action.triggered.connect(window.show)
    quit_action.triggered.connect(app.quit)
    reminder.state_changed.connect(handle_state)
    tray_icon.activated.connect(handle_activated)

    menu.addAction(status_action)
    menu.addSeparator()
    menu.addAction(check_action)
    menu.addAction(mute_action)
    menu.addSeparator()
    menu.addAction(open_action)
    menu.addAction(quit_action)

    tray_icon.setContextMenu(menu)
    handle_state(SessionState())
    return tray_icon


__all__ = ["create_tray_icon"]
