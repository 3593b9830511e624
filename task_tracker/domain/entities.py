from __future__ import annotations

from dataclasses import dataclass

from .enums import Priority


@dataclass(frozen=True)
class TaskEntity:
    id: str
    title: str
    deadline: str
    priority: Priority = Priority.MEDIUM
    completed: bool = False
