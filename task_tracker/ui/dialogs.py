from __future__ import annotations

from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QFrame,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
)

from task_tracker.domain.entities import TaskEntity
from task_tracker.domain.enums import Priority
from task_tracker.domain.errors import TaskError

from .widgets import PRIORITY_OPTIONS


class TaskDialog(QDialog):
    """Form shared by the add and edit views.

    ``on_submit(title, deadline, priority)`` runs when the user saves; a
    ``TaskError`` from it is shown and the dialog stays open.
    """

    def __init__(self, on_submit, task: TaskEntity | None = None, parent=None):
        super().__init__(parent)
        self._on_submit = on_submit
        self.setWindowTitle("Edit Task" if task else "Add New Task")
        self.setObjectName("TaskDialog")
        self.setMinimumWidth(380)

        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("Enter task title")

        self.deadline_input = QLineEdit()
        self.deadline_input.setPlaceholderText("Enter deadline (e.g., 2024-03-20)")

        self.priority_combo = QComboBox()
        for label, value in PRIORITY_OPTIONS:
            self.priority_combo.addItem(label, value)

        self.save_button = QPushButton("Update Task" if task else "Save Task")
        self.save_button.clicked.connect(self.submit)

        card = QFrame()
        card.setObjectName("TaskForm")
        layout = QVBoxLayout(card)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(8)
        layout.addWidget(QLabel("Task Title"))
        layout.addWidget(self.title_input)
        layout.addWidget(QLabel("Deadline"))
        layout.addWidget(self.deadline_input)
        layout.addWidget(QLabel("Priority"))
        layout.addWidget(self.priority_combo)
        layout.addSpacing(8)
        layout.addWidget(self.save_button)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(card)

        if task:
            self.populate(task)
        else:
            self.priority_combo.setCurrentIndex(self.priority_combo.findData(Priority.MEDIUM.value))

    def populate(self, task: TaskEntity) -> None:
        self.title_input.setText(task.title)
        self.deadline_input.setText(task.deadline)
        index = self.priority_combo.findData(task.priority.value)
        if index >= 0:
            self.priority_combo.setCurrentIndex(index)

    def submit(self) -> None:
        try:
            self._on_submit(
                self.title_input.text(),
                self.deadline_input.text(),
                self.priority_combo.currentData(),
            )
        except TaskError as exc:
            QMessageBox.warning(self, "Error", str(exc))
            return
        self.accept()
