"""Statusfenster mit Fortschritt, Stummschaltung und Einstellungen."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (QComboBox, QGroupBox, QHBoxLayout,
                               QInputDialog, QLabel, QLineEdit, QMessageBox,
                               QProgressBar, QPushButton, QVBoxLayout, QWidget)

from ..config import CHECK_INTERVAL_CHOICES, MUTE_DURATION_CHOICES
from ..models import SessionState
from ..usage import HOURLY_BUDGET

if TYPE_CHECKING:
    from ..app import ReminderApp


class StatusWindow(QWidget):
    """Kleines Begleitfenster, das den Controller-Zustand anzeigt."""

    def __init__(self, reminder: "ReminderApp", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.reminder = reminder
        self.setWindowTitle("TogglNag")
        self.setFixedWidth(300)

        title = QLabel("TogglNag")
        font = QFont()
        font.setBold(True)
        title.setFont(font)

        self.current_label = QLabel("")
        self.current_label.setStyleSheet("color: #0f9d58;")
        self.change_button = QPushButton("Change")
        self.change_button.clicked.connect(self._handle_change)
        self.rename_button = QPushButton("Rename")
        self.rename_button.clicked.connect(self._handle_rename)
        self.start_button = QPushButton("Start timer")
        self.start_button.clicked.connect(self._handle_start)

        self.progress_label = QLabel("")
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 1000)
        self.progress_bar.setTextVisible(False)

        self.muted_label = QLabel("")
        self.muted_label.setStyleSheet("color: #f4a300;")
        self.mute_button = QPushButton()
        self.mute_button.clicked.connect(self._handle_mute)
        self.mute_combo = QComboBox()
        for minutes in MUTE_DURATION_CHOICES:
            self.mute_combo.addItem(f"{minutes} min", minutes)
        self.mute_combo.currentIndexChanged.connect(self._handle_mute_duration)

        self.token_label = QLabel("")
        self.token_button = QPushButton()
        self.token_button.clicked.connect(self._handle_token)
        self.interval_combo = QComboBox()
        for minutes in CHECK_INTERVAL_CHOICES:
            self.interval_combo.addItem(f"{minutes} min", minutes)
        self.interval_combo.currentIndexChanged.connect(self._handle_interval)
        self.calls_label = QLabel("")

        self._build_ui(title)
        self._sync_settings()
        self.apply_state(SessionState())

    # ------------------------------------------------------------------
    def _build_ui(self, title: QLabel) -> None:
        current_row = QHBoxLayout()
        current_row.addWidget(self.current_label, stretch=1)
        current_row.addWidget(self.rename_button)
        current_row.addWidget(self.change_button)
        current_row.addWidget(self.start_button)

        mute_row = QHBoxLayout()
        mute_row.addWidget(self.mute_button)
        mute_row.addWidget(self.mute_combo)

        settings = QGroupBox("Settings")
        settings_layout = QVBoxLayout(settings)
        token_row = QHBoxLayout()
        token_row.addWidget(self.token_label, stretch=1)
        token_row.addWidget(self.token_button)
        interval_row = QHBoxLayout()
        interval_row.addWidget(QLabel("Check every:"))
        interval_row.addWidget(self.interval_combo)
        settings_layout.addLayout(token_row)
        settings_layout.addLayout(interval_row)
        settings_layout.addWidget(self.calls_label)

        layout = QVBoxLayout(self)
        layout.addWidget(title, alignment=Qt.AlignHCenter)
        layout.addLayout(current_row)
        layout.addWidget(self.progress_label)
        layout.addWidget(self.progress_bar)
        layout.addWidget(self.muted_label)
        layout.addLayout(mute_row)
        layout.addStretch(1)
        layout.addWidget(settings)

    def _sync_settings(self) -> None:
        config = self.reminder.config
        for combo, value in ((self.mute_combo, config.mute_duration_minutes),
                             (self.interval_combo, config.check_interval_minutes)):
            index = combo.findData(value)
            if index >= 0:
                combo.blockSignals(True)
                combo.setCurrentIndex(index)
                combo.blockSignals(False)
        self.mute_button.setText(f"Mute for {config.mute_duration_minutes} min")

        token = config.api_token or ""
        if token:
            self.token_label.setText("API Token: " + "•" * min(len(token), 20))
            self.token_button.setText("Logout")
        else:
            self.token_label.setText("No API token")
            self.token_button.setText("Add API Token")

    # ------------------------------------------------------------------
    def apply_state(self, state: SessionState) -> None:
        has_current = bool(state.current_description)
        self.current_label.setText(f"Current: {state.current_description}" if has_current else "")
        self.current_label.setVisible(has_current)
        self.change_button.setVisible(has_current)
        self.rename_button.setVisible(state.current_entry_id is not None)
        self.start_button.setVisible(state.configured and not has_current)

        if state.progress is not None:
            self.progress_label.setText(state.progress.label)
            self.progress_bar.setValue(int(state.progress.value * 1000))
        self.progress_label.setVisible(state.progress is not None)
        self.progress_bar.setVisible(state.progress is not None)

        if state.muted_until is not None:
            local_end = state.muted_until.astimezone()
            self.muted_label.setText(f"Muted until {local_end.strftime('%H:%M')}")
        self.muted_label.setVisible(state.is_muted)
        self.mute_button.setVisible(not state.is_muted)
        self.mute_combo.setVisible(not state.is_muted)

        self.calls_label.setText(f"API calls this hour: {state.api_calls}/{HOURLY_BUDGET}")
        self.calls_label.setStyleSheet("color: #db4437;" if state.near_limit else "color: gray;")

    def show_error(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)

    # ------------------------------------------------------------------
    def _handle_change(self) -> None:
        description, ok = QInputDialog.getText(self, "Switch to New Task", "New task description")
        if not ok or not description.strip():
            return
        self.reminder.change_task(description.strip())

    def _handle_rename(self) -> None:
        description, ok = QInputDialog.getText(self, "Rename Task", "Task description",
                                               QLineEdit.Normal, self.reminder.state.current_description)
        if not ok or not description.strip():
            return
        self.reminder.rename_task(description.strip())

    def _handle_start(self) -> None:
        description, ok = QInputDialog.getText(self, "Start Timer", "What are you working on?")
        if not ok or not description.strip():
            return
        self.reminder.start_task(description.strip())

    def _handle_mute(self) -> None:
        self.reminder.mute_now()

    def _handle_mute_duration(self) -> None:
        minutes = self.mute_combo.currentData()
        if minutes:
            self.reminder.set_mute_duration(int(minutes))
            self._sync_settings()

    def _handle_interval(self) -> None:
        minutes = self.interval_combo.currentData()
        if minutes:
            self.reminder.set_check_interval(int(minutes))

    def _handle_token(self) -> None:
        if self.reminder.config.api_token:
            self.reminder.logout()
        else:
            token, ok = QInputDialog.getText(
                self,
                "Enter Toggl API Token",
                "Get your API token from: https://track.toggl.com/profile",
                QLineEdit.Password,
            )
            if not ok or not token.strip():
                return
            self.reminder.save_token(token.strip())
        self._sync_settings()


__all__ = ["StatusWindow"]
