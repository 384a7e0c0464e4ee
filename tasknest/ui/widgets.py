from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFrame,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from tasknest.domain.defaults import format_minutes
from tasknest.domain.entities import SubtaskEntity, TagEntity, TaskEntity
from tasknest.domain.enums import Energy

TAG_COLORS = {
    "stone": "#D6D3D1",
    "rose": "#FECDD3",
    "blue": "#BFDBFE",
    "emerald": "#A7F3D0",
    "amber": "#FEF3C7",
    "purple": "#E9D5FF",
    "orange": "#FED7AA",
    "cyan": "#A5F3FC",
}

ENERGY_LABELS = {
    Energy.HIGH: "High energy",
    Energy.LOW: "Low energy",
}

NOTE_PREVIEW = 10


def tag_color(tag: TagEntity | None) -> str:
    if tag is None:
        return "#E7E5E4"
    return TAG_COLORS.get(tag.color, "#E7E5E4")


def info_text(
    deadline=None,
    energy: Energy | None = None,
    minutes: int | None = None,
    note: str | None = None,
) -> str:
    parts = []
    if deadline:
        parts.append(f"Due {deadline.month}/{deadline.day}")
    if energy:
        parts.append(ENERGY_LABELS.get(energy, str(energy)))
    if minutes:
        parts.append(format_minutes(minutes))
    if note:
        parts.append(note if len(note) <= NOTE_PREVIEW else note[:NOTE_PREVIEW] + "...")
    return " | ".join(parts)


class SubtaskRow(QWidget):
    def __init__(self, task: TaskEntity, subtask: SubtaskEntity, on_complete, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(18, 0, 0, 0)
        layout.setSpacing(8)

        done_button = QPushButton("○")
        done_button.setFixedWidth(28)
        done_button.setToolTip("Complete subtask")
        done_button.clicked.connect(lambda: on_complete(task, subtask))

        title = QLabel(subtask.title)
        title.setProperty("class", "subtask-title")
        meta = QLabel(info_text(subtask.deadline, subtask.energy, subtask.time, subtask.note))
        meta.setProperty("class", "task-meta")
        if subtask.note:
            meta.setToolTip(subtask.note)

        layout.addWidget(done_button)
        layout.addWidget(title)
        layout.addWidget(meta, 1)


class TaskCard(QFrame):
    def __init__(
        self,
        task: TaskEntity,
        tag: TagEntity | None,
        on_complete_main,
        on_complete_sub,
        on_edit,
        on_delete,
        parent=None,
    ):
        super().__init__(parent)
        self.task = task
        self.setObjectName("TaskCard")
        self.setFrameShape(QFrame.StyledPanel)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setStyleSheet(f"#TaskCard {{ border-left: 6px solid {tag_color(tag)}; }}")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 6, 10, 6)
        layout.setSpacing(4)

        header = QHBoxLayout()
        header.setSpacing(8)
        if not task.is_container:
            done_button = QPushButton("○")
            done_button.setFixedWidth(28)
            done_button.setToolTip("Complete task")
            done_button.clicked.connect(lambda: on_complete_main(task))
            header.addWidget(done_button)

        title = QLabel(task.title.strip() or "Untitled")
        title.setProperty("class", "task-title")
        title.setWordWrap(True)
        header.addWidget(title, 1)

        if not task.is_container:
            meta = QLabel(info_text(task.deadline, task.energy, task.est_time, task.note))
            meta.setProperty("class", "task-meta")
            if task.note:
                meta.setToolTip(task.note)
            header.addWidget(meta)
        else:
            done = len(task.subtasks) - len(task.open_subtasks)
            header.addWidget(QLabel(f"{done}/{len(task.subtasks)}"))

        edit_button = QPushButton("Edit")
        edit_button.setProperty("variant", "ghost")
        edit_button.clicked.connect(lambda: on_edit(task))
        delete_button = QPushButton("Delete")
        delete_button.setProperty("variant", "danger")
        delete_button.clicked.connect(lambda: on_delete(task))
        header.addWidget(edit_button)
        header.addWidget(delete_button)
        layout.addLayout(header)

        for subtask in task.open_subtasks:
            layout.addWidget(SubtaskRow(task, subtask, on_complete_sub))


class SectionHeader(QPushButton):
    def __init__(self, title: str, count: int, collapsed: bool, color: str | None = None, parent=None):
        arrow = "▸" if collapsed else "▾"
        super().__init__(f"{arrow} {title} ({count})", parent)
        self.setFlat(True)
        self.setProperty("class", "section-title")
        if color:
            self.setStyleSheet(f"text-align: left; border-left: 6px solid {color}; padding-left: 6px;")
        else:
            self.setStyleSheet("text-align: left;")


class SubtaskListWidget(QListWidget):
    """Draft subtask list; dropping an item reports the move as indexes."""

    def __init__(self, on_move, parent=None):
        super().__init__(parent)
        self._on_move = on_move
        self._drag_row: int | None = None
        self.setDragEnabled(True)
        self.setAcceptDrops(True)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QAbstractItemView.InternalMove)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

    def startDrag(self, supportedActions) -> None:  # type: ignore[override]
        self._drag_row = self.currentRow()
        super().startDrag(supportedActions)

    def dropEvent(self, event) -> None:  # type: ignore[override]
        super().dropEvent(event)
        from_row = self._drag_row
        self._drag_row = None
        to_row = self.currentRow()
        if from_row is not None and to_row >= 0 and from_row != to_row:
            self._on_move(from_row, to_row)
