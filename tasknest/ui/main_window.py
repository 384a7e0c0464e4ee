from __future__ import annotations

from PySide6.QtCore import QDate, Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QButtonGroup,
    QCheckBox,
    QComboBox,
    QDateEdit,
    QDialog,
    QFrame,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QRadioButton,
    QScrollArea,
    QSplitter,
    QTabWidget,
    QTextEdit,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from tasknest.config import SETTINGS
from tasknest.domain.defaults import COLOR_PALETTE, TIME_OPTIONS, format_minutes
from tasknest.domain.drafts import TaskDraft
from tasknest.domain.entities import SubtaskEntity, TaskEntity
from tasknest.domain.enums import Collection, CompletionKind, Energy, HistoryKind, QuoteMode
from tasknest.domain.quotes import QuoteSelector
from tasknest.infra.store import DocumentStore
from tasknest.services.completion import CompletionDraft, CompletionEngine
from tasknest.services.live_model import LiveModel
from tasknest.services.task_service import TaskService

from .dialogs import CompletionDialog
from .widgets import SectionHeader, SubtaskListWidget, TaskCard, tag_color

DASHBOARD_TAB = 0
INBOX_KEY = "__inbox__"
NOTICE_MS = 2000

ENERGY_OPTIONS = [
    ("Low energy", Energy.LOW.value),
    ("High energy", Energy.HIGH.value),
]


def _clear_layout(layout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget:
            widget.deleteLater()


def _fill_time_combo(combo: QComboBox, placeholder: str) -> None:
    combo.addItem(placeholder, None)
    for minutes in TIME_OPTIONS:
        combo.addItem(format_minutes(minutes), minutes)


class MainWindow(QWidget):
    def __init__(self, store: DocumentStore | None = None):
        super().__init__()
        self.setWindowTitle("TaskNest")
        self.resize(1180, 780)

        store = store or DocumentStore()
        self.model = LiveModel(store)
        self.quote_selector = QuoteSelector(mode=QuoteMode(SETTINGS.quote_mode))
        self.completion = CompletionEngine(
            store,
            on_completed=self.on_completed,
            on_error=self.show_error,
        )
        self.service = TaskService(
            store,
            self.model,
            completion=self.completion,
            quote_selector=self.quote_selector,
            on_error=self.show_error,
        )

        # Presentation-only state, keyed by tag id.
        self.collapsed: dict[str, bool] = {}
        self.editing_quote_id: str | None = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self.quote_label = QLabel("")
        self.quote_label.setObjectName("QuoteLabel")
        self.quote_label.setWordWrap(True)
        self.quote_label.setAlignment(Qt.AlignCenter)

        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_dashboard(), "Dashboard")
        self.tabs.addTab(self._build_history(), "History")
        self.tabs.addTab(self._build_settings(), "Settings")
        self.tabs.currentChanged.connect(self.on_tab_changed)

        self.notice_label = QLabel("")
        self.notice_label.setObjectName("NoticeLabel")
        self.notice_timer = QTimer(self)
        self.notice_timer.setSingleShot(True)
        self.notice_timer.setInterval(NOTICE_MS)
        self.notice_timer.timeout.connect(lambda: self.notice_label.setText(""))

        layout.addWidget(self.quote_label)
        layout.addWidget(self.tabs, 1)
        layout.addWidget(self.notice_label)

        self.model.add_listener(self.on_collection_changed)
        self.service.new_draft()
        self.model.start()
        self.load_draft(self.service.editing)

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task)
        QShortcut(QKeySequence("Ctrl+S"), self, self.save_task)

    # ---- layout ----

    def _build_dashboard(self) -> QWidget:
        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(self._build_editor())

        board_scroll = QScrollArea()
        board_scroll.setWidgetResizable(True)
        board_scroll.setFrameShape(QFrame.NoFrame)
        board = QWidget()
        self.board_layout = QVBoxLayout(board)
        self.board_layout.setContentsMargins(8, 8, 8, 8)
        self.board_layout.setSpacing(8)
        board_scroll.setWidget(board)
        splitter.addWidget(board_scroll)

        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 2)
        splitter.setSizes([380, 780])
        return splitter

    def _build_editor(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("EditorPanel")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self.editor_title = QLabel("New task")
        self.editor_title.setProperty("class", "panel-title")

        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("What needs doing?")
        self.title_input.textChanged.connect(self._sync_save_enabled)
        self.title_input.returnPressed.connect(self.save_task)

        self.inbox_check = QCheckBox("Inbox (sort it out later)")
        self.inbox_check.toggled.connect(self.on_inbox_toggled)

        self.tag_combo = QComboBox()
        self.tag_combo.currentIndexChanged.connect(self._sync_save_enabled)

        self.est_combo = QComboBox()
        _fill_time_combo(self.est_combo, "Estimate")

        self.energy_combo = QComboBox()
        for label, value in ENERGY_OPTIONS:
            self.energy_combo.addItem(label, value)

        self.deadline_check = QCheckBox("Deadline")
        self.deadline_input = QDateEdit()
        self.deadline_input.setCalendarPopup(True)
        self.deadline_input.setDate(QDate.currentDate())
        self.deadline_input.setEnabled(False)
        self.deadline_check.toggled.connect(self.deadline_input.setEnabled)

        self.note_input = QLineEdit()
        self.note_input.setPlaceholderText("Note")

        leaf_box = QFrame()
        leaf_layout = QVBoxLayout(leaf_box)
        leaf_layout.setContentsMargins(0, 0, 0, 0)
        row = QHBoxLayout()
        row.addWidget(self.est_combo)
        row.addWidget(self.energy_combo)
        leaf_layout.addLayout(row)
        row = QHBoxLayout()
        row.addWidget(self.deadline_check)
        row.addWidget(self.deadline_input, 1)
        leaf_layout.addLayout(row)
        leaf_layout.addWidget(self.note_input)
        self.leaf_box = leaf_box

        subtasks_label = QLabel("Subtasks")
        subtasks_label.setProperty("class", "section-title")

        self.subtask_input = QLineEdit()
        self.subtask_input.setPlaceholderText("Add a subtask")
        self.subtask_input.returnPressed.connect(self.add_subtask)
        self.subtask_time = QComboBox()
        _fill_time_combo(self.subtask_time, "Time")
        self.subtask_energy = QComboBox()
        for label, value in ENERGY_OPTIONS:
            self.subtask_energy.addItem(label, value)
        add_button = QPushButton("Add")
        add_button.setProperty("variant", "secondary")
        add_button.clicked.connect(self.add_subtask)

        subtask_row = QHBoxLayout()
        subtask_row.addWidget(self.subtask_input, 1)
        subtask_row.addWidget(self.subtask_time)
        subtask_row.addWidget(self.subtask_energy)
        subtask_row.addWidget(add_button)

        self.subtask_list = SubtaskListWidget(self.on_subtask_moved)
        self.subtask_list.setObjectName("SubtaskList")
        self.subtask_list.setMaximumHeight(180)
        self.subtask_list.itemDoubleClicked.connect(self.rename_subtask)

        remove_button = QPushButton("Remove subtask")
        remove_button.setProperty("variant", "ghost")
        remove_button.clicked.connect(self.remove_subtask)

        self.save_button = QPushButton("Save")
        self.save_button.clicked.connect(self.save_task)
        cancel_button = QPushButton("Cancel")
        cancel_button.setProperty("variant", "ghost")
        cancel_button.clicked.connect(self.new_task)

        actions = QHBoxLayout()
        actions.addWidget(self.save_button, 1)
        actions.addWidget(cancel_button)

        layout.addWidget(self.editor_title)
        layout.addWidget(self.title_input)
        layout.addWidget(self.inbox_check)
        layout.addWidget(self.tag_combo)
        layout.addWidget(self.leaf_box)
        layout.addWidget(subtasks_label)
        layout.addLayout(subtask_row)
        layout.addWidget(self.subtask_list)
        layout.addWidget(remove_button)
        layout.addLayout(actions)
        layout.addStretch()
        return frame

    def _build_history(self) -> QWidget:
        frame = QWidget()
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(8, 8, 8, 8)

        self.history_empty = QLabel("No completed items yet.")
        self.history_empty.setAlignment(Qt.AlignCenter)

        self.history_tree = QTreeWidget()
        self.history_tree.setHeaderLabels(["Item", "Time", "Reflection"])
        self.history_tree.setColumnWidth(0, 420)
        self.history_tree.itemDoubleClicked.connect(self.on_history_item_activated)

        layout.addWidget(self.history_empty)
        layout.addWidget(self.history_tree, 1)
        return frame

    def _build_settings(self) -> QWidget:
        frame = QWidget()
        layout = QHBoxLayout(frame)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(16)

        quotes = QVBoxLayout()
        quotes_title = QLabel("Quotes")
        quotes_title.setProperty("class", "panel-title")

        self.random_radio = QRadioButton("Random")
        self.fixed_radio = QRadioButton("Fixed")
        mode_group = QButtonGroup(self)
        mode_group.addButton(self.random_radio)
        mode_group.addButton(self.fixed_radio)
        if self.quote_selector.mode == QuoteMode.RANDOM:
            self.random_radio.setChecked(True)
        else:
            self.fixed_radio.setChecked(True)
        self.random_radio.toggled.connect(self.on_quote_mode_toggled)

        mode_row = QHBoxLayout()
        mode_row.addWidget(self.random_radio)
        mode_row.addWidget(self.fixed_radio)
        mode_row.addStretch()

        self.quote_list = QListWidget()
        self.quote_list.itemDoubleClicked.connect(self.on_quote_chosen)

        self.quote_input = QTextEdit()
        self.quote_input.setPlaceholderText("A line worth reading every day")
        self.quote_input.setMaximumHeight(90)
        self.quote_input.textChanged.connect(self.on_quote_text_changed)

        quote_buttons = QHBoxLayout()
        self.quote_save_button = QPushButton("Add quote")
        self.quote_save_button.clicked.connect(self.save_quote)
        edit_quote_button = QPushButton("Edit")
        edit_quote_button.setProperty("variant", "secondary")
        edit_quote_button.clicked.connect(self.edit_quote)
        delete_quote_button = QPushButton("Delete")
        delete_quote_button.setProperty("variant", "danger")
        delete_quote_button.clicked.connect(self.delete_quote)
        quote_buttons.addWidget(self.quote_save_button, 1)
        quote_buttons.addWidget(edit_quote_button)
        quote_buttons.addWidget(delete_quote_button)

        quotes.addWidget(quotes_title)
        quotes.addLayout(mode_row)
        quotes.addWidget(self.quote_list, 1)
        quotes.addWidget(self.quote_input)
        quotes.addLayout(quote_buttons)

        tags = QVBoxLayout()
        tags_title = QLabel("Tags")
        tags_title.setProperty("class", "panel-title")
        self.tag_list = QListWidget()
        self.tag_list.currentItemChanged.connect(self.on_tag_selected)

        self.tag_name_input = QLineEdit()
        self.tag_name_input.setPlaceholderText("Tag name")
        self.tag_color_combo = QComboBox()
        for color in COLOR_PALETTE:
            self.tag_color_combo.addItem(color, color)

        tag_buttons = QHBoxLayout()
        add_tag_button = QPushButton("Add tag")
        add_tag_button.clicked.connect(self.add_tag)
        update_tag_button = QPushButton("Update")
        update_tag_button.setProperty("variant", "secondary")
        update_tag_button.clicked.connect(self.update_tag)
        delete_tag_button = QPushButton("Delete")
        delete_tag_button.setProperty("variant", "danger")
        delete_tag_button.clicked.connect(self.delete_tag)
        tag_buttons.addWidget(add_tag_button, 1)
        tag_buttons.addWidget(update_tag_button)
        tag_buttons.addWidget(delete_tag_button)

        tags.addWidget(tags_title)
        tags.addWidget(self.tag_list, 1)
        tags.addWidget(self.tag_name_input)
        tags.addWidget(self.tag_color_combo)
        tags.addLayout(tag_buttons)

        layout.addLayout(quotes, 1)
        layout.addLayout(tags, 1)
        return frame

    # ---- live updates ----

    def on_collection_changed(self, collection: Collection) -> None:
        if collection == Collection.QUOTES:
            self.refresh_quote_list()
            self.refresh_quote()
            return
        if collection == Collection.TAGS:
            self.refresh_tag_combo()
            self.refresh_tag_list()
        self.refresh_dashboard()
        self.refresh_history()

    def on_tab_changed(self, index: int) -> None:
        if index == DASHBOARD_TAB:
            self.refresh_quote()

    def refresh_quote(self) -> None:
        self.quote_label.setText(self.quote_selector.select(self.model.quotes))

    def refresh_dashboard(self) -> None:
        _clear_layout(self.board_layout)
        view = self.model.dashboard()

        if view.inbox:
            self._add_section(INBOX_KEY, "Inbox", view.inbox, None)
        for bucket in view.buckets:
            title = bucket.tag.name if bucket.tag else "Other"
            self._add_section(bucket.key, title, bucket.tasks, bucket.tag)

        if not view.inbox and not view.buckets:
            empty = QLabel("Nothing pending. Enjoy the quiet.")
            empty.setAlignment(Qt.AlignCenter)
            self.board_layout.addWidget(empty)
        self.board_layout.addStretch()

    def _add_section(self, key: str, title: str, tasks, tag) -> None:
        collapsed = self.collapsed.get(key, False)
        header = SectionHeader(title, len(tasks), collapsed, tag_color(tag) if tag else None)
        header.clicked.connect(lambda: self.toggle_section(key))
        self.board_layout.addWidget(header)
        if collapsed:
            return
        for task in tasks:
            card = TaskCard(
                task,
                self.model.find_tag(task.tag_id),
                on_complete_main=self.complete_task,
                on_complete_sub=self.complete_subtask,
                on_edit=self.edit_task,
                on_delete=self.delete_task,
            )
            self.board_layout.addWidget(card)

    def toggle_section(self, key: str) -> None:
        self.collapsed[key] = not self.collapsed.get(key, False)
        self.refresh_dashboard()

    def refresh_history(self) -> None:
        self.history_tree.clear()
        days = self.model.history()
        self.history_empty.setVisible(not days)
        self.history_tree.setVisible(bool(days))

        for day in days:
            total = format_minutes(day.total_actual_time)
            day_item = QTreeWidgetItem([day.day.strftime("%Y-%m-%d"), total, ""])
            self.history_tree.addTopLevelItem(day_item)
            for record in day.records:
                if record.kind == HistoryKind.GROUPED:
                    parent = QTreeWidgetItem([record.task.title, "", ""])
                    day_item.addChild(parent)
                    for sub in record.subtasks:
                        parent.addChild(self._history_item(record.task, sub))
                    parent.setExpanded(True)
                else:
                    day_item.addChild(self._history_item(record.task, None))
            day_item.setExpanded(True)

    @staticmethod
    def _history_item(task: TaskEntity, subtask: SubtaskEntity | None) -> QTreeWidgetItem:
        subject = subtask or task
        item = QTreeWidgetItem(
            [
                subject.title,
                f"{subject.actual_time}m" if subject.actual_time else "",
                subject.reflection or "",
            ]
        )
        item.setData(0, Qt.UserRole, (task.id, subtask.id if subtask else None))
        return item

    def refresh_tag_combo(self) -> None:
        current = self.tag_combo.currentData()
        self.tag_combo.blockSignals(True)
        self.tag_combo.clear()
        self.tag_combo.addItem("Choose a tag...", None)
        for tag in self.model.effective_tags:
            self.tag_combo.addItem(tag.name, tag.id)
        index = self.tag_combo.findData(current)
        self.tag_combo.setCurrentIndex(max(index, 0))
        self.tag_combo.blockSignals(False)
        self._sync_save_enabled()

    def refresh_tag_list(self) -> None:
        self.tag_list.clear()
        for tag in self.model.effective_tags:
            item = QListWidgetItem(tag.name)
            item.setData(Qt.UserRole, tag.id)
            item.setToolTip(tag.color)
            self.tag_list.addItem(item)

    def refresh_quote_list(self) -> None:
        self.quote_list.clear()
        for index, quote in enumerate(self.model.effective_quotes):
            item = QListWidgetItem(quote.text)
            item.setData(Qt.UserRole, quote.id)
            if self.quote_selector.mode == QuoteMode.FIXED and index == self.quote_selector.fixed_index:
                item.setText(f"● {quote.text}")
            self.quote_list.addItem(item)

    # ---- editor ----

    def load_draft(self, draft: TaskDraft | None) -> None:
        draft = draft or self.service.new_draft()
        self.refresh_tag_combo()
        self.editor_title.setText("Edit task" if draft.task_id else "New task")
        self.title_input.setText(draft.title)
        self.inbox_check.setChecked(draft.is_temp)
        self.tag_combo.setEnabled(not draft.is_temp)
        self.tag_combo.setCurrentIndex(max(self.tag_combo.findData(draft.tag_id), 0))
        self.est_combo.setCurrentIndex(max(self.est_combo.findData(draft.est_time), 0))
        self.energy_combo.setCurrentIndex(max(self.energy_combo.findData(draft.energy.value), 0))
        self.deadline_check.setChecked(draft.deadline is not None)
        if draft.deadline:
            self.deadline_input.setDate(QDate(draft.deadline.year, draft.deadline.month, draft.deadline.day))
        self.note_input.setText(draft.note)
        self.render_subtasks()

    def render_subtasks(self) -> None:
        draft = self.service.editing
        self.subtask_list.clear()
        subtasks = draft.subtasks if draft else []
        for sub in subtasks:
            label = sub.title
            if sub.time:
                label += f"  ({format_minutes(sub.time)})"
            if sub.is_completed:
                label = f"✓ {label}"
            item = QListWidgetItem(label)
            item.setData(Qt.UserRole, sub.id)
            self.subtask_list.addItem(item)
        # effort and schedule live on the subtasks once there are any
        self.leaf_box.setEnabled(not subtasks)
        self._sync_save_enabled()

    def _collect_form(self) -> TaskDraft:
        draft = self.service.editing or self.service.new_draft()
        draft.title = self.title_input.text()
        draft.is_temp = self.inbox_check.isChecked()
        draft.tag_id = None if draft.is_temp else self.tag_combo.currentData()
        draft.est_time = self.est_combo.currentData()
        draft.energy = Energy(self.energy_combo.currentData())
        draft.deadline = self.deadline_input.date().toPython() if self.deadline_check.isChecked() else None
        draft.note = self.note_input.text()
        return draft

    def _sync_save_enabled(self, *_args) -> None:
        if not hasattr(self, "save_button"):
            return
        title_ok = bool(self.title_input.text().strip())
        tag_ok = self.inbox_check.isChecked() or self.tag_combo.currentData() is not None
        self.save_button.setEnabled(title_ok and tag_ok)

    def on_inbox_toggled(self, checked: bool) -> None:
        self.tag_combo.setEnabled(not checked)
        self._sync_save_enabled()

    def new_task(self) -> None:
        self.load_draft(self.service.new_draft())
        self.title_input.setFocus()

    def edit_task(self, task: TaskEntity) -> None:
        draft = self.service.edit_task(task.id)
        if draft is None:
            return
        self.load_draft(draft)
        self.tabs.setCurrentIndex(DASHBOARD_TAB)
        self.title_input.setFocus()

    def save_task(self) -> None:
        draft = self._collect_form()
        if not self.service.can_save(draft):
            return
        self.service.save_draft(draft)
        self.load_draft(self.service.new_draft())

    def delete_task(self, task: TaskEntity) -> None:
        confirm = QMessageBox.question(self, "Delete task", f"Delete \"{task.title}\"?")
        if confirm != QMessageBox.Yes:
            return
        was_editing = self.service.editing is not None and self.service.editing.task_id == task.id
        self.service.delete_task(task.id)
        if was_editing:
            self.load_draft(self.service.new_draft())

    def add_subtask(self) -> None:
        draft = self._collect_form()
        energy = Energy(self.subtask_energy.currentData())
        if draft.add_subtask(self.subtask_input.text(), self.subtask_time.currentData(), energy) is None:
            return
        self.subtask_input.clear()
        self.subtask_time.setCurrentIndex(0)
        self.render_subtasks()

    def rename_subtask(self, item: QListWidgetItem) -> None:
        draft = self.service.editing
        if draft is None:
            return
        subtask_id = item.data(Qt.UserRole)
        current = next((sub for sub in draft.subtasks if sub.id == subtask_id), None)
        if current is None:
            return
        title, ok = QInputDialog.getText(self, "Rename subtask", "Title", text=current.title)
        if ok and draft.edit_subtask(subtask_id, title=title) is not None:
            self.render_subtasks()

    def remove_subtask(self) -> None:
        draft = self.service.editing
        item = self.subtask_list.currentItem()
        if draft is None or item is None:
            return
        draft.remove_subtask(item.data(Qt.UserRole))
        self.render_subtasks()

    def on_subtask_moved(self, from_index: int, to_index: int) -> None:
        draft = self.service.editing
        if draft is None:
            return
        draft.move_subtask(from_index, to_index)
        self.render_subtasks()

    # ---- completion ----

    def complete_task(self, task: TaskEntity) -> None:
        draft = self.completion.begin_completion(CompletionKind.MAIN, task)
        if draft is not None:
            self._run_draft_dialog(draft)

    def complete_subtask(self, task: TaskEntity, subtask: SubtaskEntity) -> None:
        draft = self.completion.begin_completion(CompletionKind.SUB, task, subtask)
        if draft is not None:
            self._run_draft_dialog(draft)

    def on_history_item_activated(self, item: QTreeWidgetItem, _column: int) -> None:
        ref = item.data(0, Qt.UserRole)
        if not ref:
            return
        task_id, subtask_id = ref
        task = self.model.find_task(task_id)
        if task is None:
            return
        if subtask_id:
            draft = self.completion.begin_correction(CompletionKind.SUB, task, task.find_subtask(subtask_id))
        else:
            draft = self.completion.begin_correction(CompletionKind.MAIN, task)
        if draft is not None:
            self._run_draft_dialog(draft)

    def _run_draft_dialog(self, draft: CompletionDraft) -> None:
        dialog = CompletionDialog(draft, self)
        accepted = dialog.exec() == QDialog.Accepted
        if self.completion.draft is not draft:
            return
        if not accepted:
            self.completion.discard()
            return
        self.completion.update_draft(**dialog.values())
        self.completion.confirm()

    def on_completed(self, draft: CompletionDraft) -> None:
        self.show_notice(f"Well done: {draft.title}")

    # ---- quotes ----

    def on_quote_mode_toggled(self, random_checked: bool) -> None:
        mode = QuoteMode.RANDOM if random_checked else QuoteMode.FIXED
        self.quote_label.setText(self.quote_selector.set_mode(mode, self.model.quotes))
        self.refresh_quote_list()

    def on_quote_chosen(self, item: QListWidgetItem) -> None:
        index = self.quote_list.row(item)
        self.quote_label.setText(self.quote_selector.choose(index, self.model.quotes))
        self.fixed_radio.setChecked(True)
        self.refresh_quote_list()

    def on_quote_text_changed(self) -> None:
        if self.editing_quote_id is None:
            return
        index = next(
            (i for i, quote in enumerate(self.model.quotes) if quote.id == self.editing_quote_id),
            -1,
        )
        text = self.quote_input.toPlainText()
        self.quote_label.setText(self.quote_selector.preview(self.model.quotes, index, text))

    def edit_quote(self) -> None:
        item = self.quote_list.currentItem()
        if item is None or not self.model.quotes:
            return
        quote = self.model.quotes[self.quote_list.row(item)]
        self.editing_quote_id = quote.id
        self.quote_input.setPlainText(quote.text)
        self.quote_save_button.setText("Save quote")

    def save_quote(self) -> None:
        self.service.save_quote(self.quote_input.toPlainText(), self.editing_quote_id)
        self.editing_quote_id = None
        self.quote_input.clear()
        self.quote_save_button.setText("Add quote")

    def delete_quote(self) -> None:
        item = self.quote_list.currentItem()
        if item is None or not self.model.quotes:
            return
        self.service.delete_quote(item.data(Qt.UserRole))

    # ---- tags ----

    def on_tag_selected(self, current: QListWidgetItem | None, _previous=None) -> None:
        if current is None:
            return
        tag = self.model.find_tag(current.data(Qt.UserRole))
        if tag is None:
            return
        self.tag_name_input.setText(tag.name)
        self.tag_color_combo.setCurrentIndex(max(self.tag_color_combo.findData(tag.color), 0))

    def add_tag(self) -> None:
        if self.service.save_tag(self.tag_name_input.text(), self.tag_color_combo.currentData()):
            self.tag_name_input.clear()

    def update_tag(self) -> None:
        item = self.tag_list.currentItem()
        if item is None or not self.model.tags:
            return
        self.service.save_tag(
            self.tag_name_input.text(),
            self.tag_color_combo.currentData(),
            tag_id=item.data(Qt.UserRole),
        )

    def delete_tag(self) -> None:
        item = self.tag_list.currentItem()
        if item is None:
            return
        if not self.service.delete_tag(item.data(Qt.UserRole)):
            self.show_notice("The last tag cannot be deleted.")

    # ---- notices ----

    def show_notice(self, message: str) -> None:
        self.notice_label.setText(message)
        self.notice_timer.start()

    def show_error(self, message: str) -> None:
        QMessageBox.warning(self, "Something went wrong", message)
