"""Filter and sort pipeline that turns the full collection into the displayed list.

The stages always run in the same order: search, completion filter, sort.
Nothing here touches the input collection; every call builds a new tuple.
"""
from __future__ import annotations

import locale
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from .entities import TaskEntity
from .enums import CompletionFilter, SortKey

# Unparsable deadlines sort after every valid date and compare equal to each other.
_VALID_DEADLINE = 0
_INVALID_DEADLINE = 1


@dataclass(frozen=True)
class TaskFilters:
    search: str = ""
    completion: CompletionFilter = CompletionFilter.ALL
    sort_key: SortKey = SortKey.PRIORITY

    def apply(self, tasks: Sequence[TaskEntity]) -> tuple[TaskEntity, ...]:
        return derive(tasks, self.search, self.completion, self.sort_key)


def derive(
    tasks: Sequence[TaskEntity],
    search_query: str = "",
    completion_filter: CompletionFilter | str = CompletionFilter.ALL,
    sort_key: SortKey | str = SortKey.PRIORITY,
) -> tuple[TaskEntity, ...]:
    completion = CompletionFilter(completion_filter)
    key = SortKey(sort_key)

    visible = _apply_search(tasks, search_query)
    visible = _apply_completion(visible, completion)
    return tuple(sorted(visible, key=_SORT_KEYS[key]))


def _apply_search(tasks: Iterable[TaskEntity], search_query: str) -> list[TaskEntity]:
    query = (search_query or "").strip().casefold()
    if not query:
        return list(tasks)
    return [
        task
        for task in tasks
        if query in task.title.casefold() or query in task.deadline.casefold()
    ]


def _apply_completion(tasks: Iterable[TaskEntity], completion: CompletionFilter) -> list[TaskEntity]:
    if completion == CompletionFilter.ACTIVE:
        return [task for task in tasks if not task.completed]
    if completion == CompletionFilter.COMPLETED:
        return [task for task in tasks if task.completed]
    return list(tasks)


def parse_deadline(value: str) -> datetime | None:
    """Parse an ISO-8601 date or datetime; aware values become naive UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _priority_key(task: TaskEntity) -> int:
    return -task.priority.weight


def _deadline_key(task: TaskEntity) -> tuple[int, datetime]:
    parsed = parse_deadline(task.deadline)
    if parsed is None:
        return (_INVALID_DEADLINE, datetime.min)
    return (_VALID_DEADLINE, parsed)


def _title_key(task: TaskEntity) -> tuple[str, str]:
    return (locale.strxfrm(task.title.casefold()), locale.strxfrm(task.title))


_SORT_KEYS = {
    SortKey.PRIORITY: _priority_key,
    SortKey.DEADLINE: _deadline_key,
    SortKey.TITLE: _title_key,
}


def empty_list_message(search_query: str) -> str:
    if (search_query or "").strip():
        return "No tasks match your search"
    return "No tasks yet. Add one!"
