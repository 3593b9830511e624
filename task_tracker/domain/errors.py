"""Failures raised by the task engine.

Every failure is recoverable: the in-memory collection is left as it was
before the failing call, and ``str(exc)`` is a message fit for an alert.
"""
from __future__ import annotations


class TaskError(Exception):
    """Base class for task engine failures."""


class ValidationFailure(TaskError):
    pass


class NotFoundFailure(TaskError):
    def __init__(self, task_id: str) -> None:
        super().__init__("Task not found")
        self.task_id = task_id


class StorageFailure(TaskError):
    LOAD = "load"
    SAVE = "save"

    def __init__(self, operation: str, detail: str | None = None) -> None:
        super().__init__(f"Could not {operation} tasks")
        self.operation = operation
        self.detail = detail
