from __future__ import annotations

import asyncio

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QComboBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from task_tracker.domain.enums import CompletionFilter, SortKey
from task_tracker.domain.errors import NotFoundFailure, TaskError
from task_tracker.domain.filters import TaskFilters, empty_list_message
from task_tracker.services.session_loader import SessionLoader
from task_tracker.services.task_repository import TaskRepository

from .dialogs import TaskDialog
from .widgets import TaskItemWidget, TaskListWidget

FILTERS = [
    ("All", CompletionFilter.ALL.value),
    ("Active", CompletionFilter.ACTIVE.value),
    ("Completed", CompletionFilter.COMPLETED.value),
]

SORT_OPTIONS = [
    ("Priority", SortKey.PRIORITY.value),
    ("Deadline", SortKey.DEADLINE.value),
    ("Title", SortKey.TITLE.value),
]


class MainWindow(QWidget):
    def __init__(
        self,
        repository: TaskRepository,
        loader: SessionLoader,
        loop: asyncio.AbstractEventLoop,
    ):
        super().__init__()
        self.setWindowTitle("My Tasks")
        self.resize(720, 760)

        self.repository = repository
        self.loader = loader
        self._loop = loop

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.addWidget(self._build_center())

        self.reload()

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task)

    def _build_center(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("CenterPanel")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        header = QHBoxLayout()
        header_title = QLabel("My Tasks")
        header_title.setProperty("class", "panel-title")
        self.stats_label = QLabel("")
        self.stats_label.setProperty("class", "stats-badge")
        header.addWidget(header_title)
        header.addStretch()
        header.addWidget(self.stats_label)

        action_bar = QFrame()
        action_bar.setObjectName("ActionBar")
        action_layout = QVBoxLayout(action_bar)
        action_layout.setContentsMargins(12, 10, 12, 10)
        action_layout.setSpacing(8)

        primary_row = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search tasks...")
        self.search_input.setMinimumWidth(220)
        self.search_input.textChanged.connect(self.refresh_tasks)

        add_button = QPushButton("New task")
        add_button.clicked.connect(self.new_task)

        primary_row.addWidget(self.search_input, 1)
        primary_row.addWidget(add_button)

        secondary_row = QHBoxLayout()
        self.filter_combo = QComboBox()
        for label, key in FILTERS:
            self.filter_combo.addItem(label, key)
        self.filter_combo.currentIndexChanged.connect(self.refresh_tasks)

        self.sort_combo = QComboBox()
        for label, key in SORT_OPTIONS:
            self.sort_combo.addItem(label, key)
        self.sort_combo.currentIndexChanged.connect(self.refresh_tasks)

        secondary_row.addWidget(QLabel("Show:"))
        secondary_row.addWidget(self.filter_combo)
        secondary_row.addStretch()
        secondary_row.addWidget(QLabel("Sort by:"))
        secondary_row.addWidget(self.sort_combo)

        action_layout.addLayout(primary_row)
        action_layout.addLayout(secondary_row)

        self.task_list = TaskListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(10)

        self.empty_label = QLabel("")
        self.empty_label.setAlignment(Qt.AlignCenter)
        self.empty_label.setProperty("class", "empty-text")

        layout.addLayout(header)
        layout.addWidget(action_bar)
        layout.addWidget(self.empty_label)
        layout.addWidget(self.task_list, 1)

        return frame

    def _run(self, coro):
        return self._loop.run_until_complete(coro)

    def _later(self, handler):
        # Cards are rebuilt by refresh_tasks, so leave the emitting slot first.
        return lambda task_id: QTimer.singleShot(0, lambda: handler(task_id))

    def current_filters(self) -> TaskFilters:
        return TaskFilters(
            search=self.search_input.text(),
            completion=CompletionFilter(self.filter_combo.currentData()),
            sort_key=SortKey(self.sort_combo.currentData()),
        )

    def reload(self) -> None:
        try:
            self._run(self.loader.load())
        except TaskError as exc:
            QMessageBox.warning(self, "Error", str(exc))
        self.refresh_tasks()

    def refresh_tasks(self) -> None:
        filters = self.current_filters()
        tasks = filters.apply(self.repository.tasks)
        self.task_list.clear()

        for task in tasks:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            widget = TaskItemWidget(
                task,
                self._later(self.toggle_task),
                self._later(self.edit_task),
                self._later(self.delete_task),
            )
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())

        self.empty_label.setText(empty_list_message(filters.search))
        self.empty_label.setVisible(not tasks)

        stats = self.repository.stats()
        self.stats_label.setText(
            f"Total: {stats['total']} • Active: {stats['active']} • Completed: {stats['completed']}"
        )
        self.task_list.sync_item_sizes()

    def new_task(self) -> None:
        def submit(title: str, deadline: str, priority: str) -> None:
            self._run(self.repository.add(title, deadline, priority))

        dialog = TaskDialog(submit, parent=self)
        dialog.exec()
        self.reload()

    def edit_task(self, task_id: str) -> None:
        try:
            task = self.repository.get(task_id)
        except NotFoundFailure:
            QMessageBox.warning(self, "Error", "Failed to load task")
            self.refresh_tasks()
            return

        def submit(title: str, deadline: str, priority: str) -> None:
            self._run(self.repository.update(task_id, title, deadline, priority))

        dialog = TaskDialog(submit, task=task, parent=self)
        dialog.exec()
        self.reload()

    def toggle_task(self, task_id: str) -> None:
        try:
            self._run(self.repository.toggle_completed(task_id))
        except TaskError as exc:
            QMessageBox.warning(self, "Error", str(exc))
        self.refresh_tasks()

    def delete_task(self, task_id: str) -> None:
        confirm = QMessageBox.question(
            self,
            "Delete Task",
            "Are you sure you want to delete this task?",
        )
        if confirm != QMessageBox.Yes:
            return
        try:
            self._run(self.repository.remove(task_id))
        except TaskError as exc:
            QMessageBox.warning(self, "Error", str(exc))
        self.refresh_tasks()
