"""Erinnerungsdialog, wenn kein Timer läuft."""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Optional, Sequence

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtWidgets import (QComboBox, QDialog, QHBoxLayout, QLabel,
                               QPushButton, QVBoxLayout, QWidget)

from ..models import PromptResult


@dataclass(slots=True)
class PromptRequest:
    title: str
    message: str
    suggestions: list[str]
    future: Future


class ReminderDialog(QDialog):
    """Modaler Dialog mit editierbarer Vorschlagsliste und Start / Mute / Dismiss."""

    def __init__(self, request: PromptRequest, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(request.title)
        self.setWindowFlag(Qt.WindowStaysOnTopHint, True)
        self.result_value = PromptResult.dismiss()

        self.combo = QComboBox()
        self.combo.setEditable(True)
        self.combo.addItems(request.suggestions)
        self.combo.setCurrentIndex(-1)
        self.combo.lineEdit().setPlaceholderText("What are you working on?")
        self.combo.setMinimumWidth(300)

        self.start_button = QPushButton("Start Timer")
        self.start_button.setDefault(True)
        self.mute_button = QPushButton("Mute")
        self.dismiss_button = QPushButton("Dismiss")

        self.start_button.clicked.connect(self._handle_start)
        self.mute_button.clicked.connect(self._handle_mute)
        self.dismiss_button.clicked.connect(self.reject)

        button_row = QHBoxLayout()
        button_row.addStretch(1)
        button_row.addWidget(self.dismiss_button)
        button_row.addWidget(self.mute_button)
        button_row.addWidget(self.start_button)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel(request.message))
        layout.addWidget(self.combo)
        layout.addLayout(button_row)

    def _handle_start(self) -> None:
        self.result_value = PromptResult.start(self.combo.currentText().strip())
        self.accept()

    def _handle_mute(self) -> None:
        self.result_value = PromptResult.mute()
        self.accept()


class DialogPrompt(QObject):
    """Zeigt :class:`ReminderDialog` im GUI-Thread an.

    ``ask`` wird auf dem Core-Loop erwartet. Die Anfrage gelangt über ein
    Queued-Signal in den GUI-Thread, die Antwort kommt über ein Future zurück.
    """

    requested = Signal(object)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.requested.connect(self._show)

    async def ask(self, title: str, message: str, suggestions: Sequence[str]) -> PromptResult:
        future: Future = Future()
        self.requested.emit(PromptRequest(title, message, list(suggestions), future))
        return await asyncio.wrap_future(future)

    def _show(self, request: PromptRequest) -> None:
        if request.future.done():
            return
        dialog = ReminderDialog(request)
        dialog.raise_()
        dialog.activateWindow()
        dialog.exec()
        if not request.future.done():
            request.future.set_result(dialog.result_value)


__all__ = ["DialogPrompt", "ReminderDialog", "PromptRequest"]
