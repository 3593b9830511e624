from __future__ import annotations

from PySide6.QtCore import QSize, Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from task_tracker.domain.entities import TaskEntity
from task_tracker.domain.enums import Priority

PRIORITY_OPTIONS = [
    ("Low", Priority.LOW.value),
    ("Medium", Priority.MEDIUM.value),
    ("High", Priority.HIGH.value),
]

PRIORITY_COLORS = {
    Priority.LOW: "#00C851",
    Priority.MEDIUM: "#ffbb33",
    Priority.HIGH: "#ff4444",
}


class TaskItemWidget(QWidget):
    def __init__(self, task: TaskEntity, on_toggle, on_edit, on_delete, parent=None):
        super().__init__(parent)
        self.task = task
        self._on_toggle = on_toggle
        self._on_edit = on_edit
        self._on_delete = on_delete

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setMinimumHeight(64)

        self.done_check = QCheckBox()
        self.done_check.setChecked(task.completed)
        self.done_check.toggled.connect(self._handle_toggle)

        title = QLabel(task.title)
        title.setProperty("class", "task-title")
        title.setWordWrap(True)
        title.setMinimumWidth(0)
        title.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)

        meta = QLabel(f"Deadline: {task.deadline}")
        meta.setProperty("class", "task-meta")
        meta.setWordWrap(True)

        if task.completed:
            font = title.font()
            font.setStrikeOut(True)
            title.setFont(font)
            title.setStyleSheet("color: #999999;")
            meta.setStyleSheet("color: #999999;")

        info = QVBoxLayout()
        info.setSpacing(4)
        info.addWidget(title)
        info.addWidget(meta)

        priority = QLabel(task.priority.value.upper())
        priority.setProperty("class", "task-priority")
        priority.setStyleSheet(
            f"background-color: {PRIORITY_COLORS.get(task.priority, '#666666')};"
            " color: #FFFFFF; padding: 4px 10px; border-radius: 10px;"
        )
        priority.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

        edit_button = QPushButton("✎")
        edit_button.setProperty("variant", "secondary")
        edit_button.setFixedWidth(32)
        edit_button.clicked.connect(lambda: self._on_edit(self.task.id))

        delete_button = QPushButton("×")
        delete_button.setProperty("variant", "danger")
        delete_button.setFixedWidth(32)
        delete_button.clicked.connect(lambda: self._on_delete(self.task.id))

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(8)
        layout.addWidget(self.done_check, 0, Qt.AlignVCenter)
        layout.addLayout(info, 1)
        layout.addWidget(priority, 0, Qt.AlignVCenter)
        layout.addWidget(edit_button, 0, Qt.AlignVCenter)
        layout.addWidget(delete_button, 0, Qt.AlignVCenter)

    def _handle_toggle(self, _checked: bool) -> None:
        self._on_toggle(self.task.id)


class TaskListWidget(QListWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._h_margin = 12
        self._v_margin = 8
        self.setSelectionMode(QAbstractItemView.NoSelection)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._update_viewport_margins()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.sync_item_sizes()

    def _update_viewport_margins(self) -> None:
        scrollbar_width = self.verticalScrollBar().width() or self.verticalScrollBar().sizeHint().width()
        right_margin = self._h_margin + (scrollbar_width if self.verticalScrollBar().isVisible() else 0)
        self.setViewportMargins(self._h_margin, self._v_margin, right_margin, self._v_margin)

    def sync_item_sizes(self) -> None:
        self._update_viewport_margins()
        viewport_width = self.viewport().width()
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                widget.setMinimumWidth(viewport_width)
                widget.setMaximumWidth(viewport_width)
                widget.adjustSize()
                hint = widget.sizeHint()
                item.setSizeHint(QSize(viewport_width, hint.height()))
                widget.resize(viewport_width, hint.height())
