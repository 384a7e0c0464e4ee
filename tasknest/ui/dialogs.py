from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QDateEdit,
    QDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QTextEdit,
    QVBoxLayout,
)

from tasknest.services.completion import CompletionDraft


class CompletionDialog(QDialog):
    """Retrospective form shared by completion and history correction."""

    def __init__(self, draft: CompletionDraft, parent=None):
        super().__init__(parent)
        self.draft = draft
        self.setWindowTitle("Edit record" if draft.correction else "Complete")
        self.setObjectName("CompletionDialog")
        self.resize(380, 320)

        title = QLabel(draft.title)
        title.setProperty("class", "panel-title")
        title.setWordWrap(True)

        self.date_input = QDateEdit()
        self.date_input.setCalendarPopup(True)
        stamp = draft.completed_at
        self.date_input.setDate(QDate(stamp.year, stamp.month, stamp.day))

        self.actual_input = QSpinBox()
        self.actual_input.setRange(0, 24 * 60)
        self.actual_input.setSingleStep(15)
        self.actual_input.setSuffix(" min")
        self.actual_input.setSpecialValueText("Not recorded")
        self.actual_input.setValue(draft.actual_time or 0)

        self.reflection_input = QTextEdit()
        self.reflection_input.setPlaceholderText("How did it go?")
        self.reflection_input.setPlainText(draft.reflection)

        confirm_button = QPushButton("Save" if draft.correction else "Done")
        confirm_button.clicked.connect(self.accept)
        cancel_button = QPushButton("Cancel")
        cancel_button.setProperty("variant", "ghost")
        cancel_button.clicked.connect(self.reject)

        buttons = QHBoxLayout()
        buttons.addStretch()
        buttons.addWidget(cancel_button)
        buttons.addWidget(confirm_button)

        layout = QVBoxLayout(self)
        layout.addWidget(title)
        layout.addWidget(QLabel("Completed on"))
        layout.addWidget(self.date_input)
        layout.addWidget(QLabel("Actual time"))
        layout.addWidget(self.actual_input)
        layout.addWidget(QLabel("Reflection"))
        layout.addWidget(self.reflection_input)
        layout.addLayout(buttons)

    def values(self) -> dict:
        day = self.date_input.date().toPython()
        completed_at = datetime.combine(day, self.draft.completed_at.time())
        actual = self.actual_input.value()
        return {
            "completed_at": completed_at,
            "actual_time": actual or None,
            "reflection": self.reflection_input.toPlainText().strip(),
        }
