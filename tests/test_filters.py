from __future__ import annotations

import locale
import unicodedata
from dataclasses import replace

import pytest

from task_tracker.domain.entities import TaskEntity
from task_tracker.domain.enums import CompletionFilter, Priority, SortKey
from task_tracker.domain.filters import TaskFilters, derive, empty_list_message, parse_deadline


def _task(task_id: str, title: str, deadline: str, priority: str = "medium", completed: bool = False) -> TaskEntity:
    return TaskEntity(
        id=task_id,
        title=title,
        deadline=deadline,
        priority=Priority(priority),
        completed=completed,
    )


MILK = _task("1", "Buy milk", "2024-03-20", "low")
TAXES = _task("2", "File taxes", "2024-03-01", "high")


def _titles(tasks) -> list[str]:
    return [task.title for task in tasks]


def test_deadline_sort_orders_by_date() -> None:
    result = derive([MILK, TAXES], "", "all", "deadline")

    assert _titles(result) == ["File taxes", "Buy milk"]


@pytest.mark.parametrize("completion", list(CompletionFilter))
@pytest.mark.parametrize("sort_key", list(SortKey))
def test_search_keeps_only_matching_titles(completion, sort_key) -> None:
    tasks = [MILK, replace(TAXES, completed=completion == CompletionFilter.COMPLETED)]

    result = derive(tasks, "tax", completion, sort_key)

    assert _titles(result) == ["File taxes"]


def test_search_is_trimmed_case_insensitive_and_matches_deadline() -> None:
    assert _titles(derive([MILK, TAXES], "  MILK ")) == ["Buy milk"]
    assert _titles(derive([MILK, TAXES], "03-20")) == ["Buy milk"]
    assert _titles(derive([MILK, TAXES], "   ", sort_key="title")) == ["Buy milk", "File taxes"]


def test_completion_filter() -> None:
    done = _task("3", "Done thing", "2024-02-01", completed=True)
    tasks = [MILK, done, TAXES]

    assert derive(tasks, completion_filter="all", sort_key="deadline") == (done, TAXES, MILK)
    assert derive(tasks, completion_filter="active", sort_key="deadline") == (TAXES, MILK)
    assert derive(tasks, completion_filter="completed", sort_key="deadline") == (done,)


def test_priority_sort_is_descending_and_stable() -> None:
    first_high = _task("1", "First", "2024-01-01", "high")
    low = _task("2", "Low", "2024-01-01", "low")
    second_high = _task("3", "Second", "2024-01-01", "high")
    medium = _task("4", "Medium", "2024-01-01", "medium")

    result = derive([first_high, low, second_high, medium], sort_key=SortKey.PRIORITY)

    assert result == (first_high, second_high, medium, low)


def test_unparsable_deadlines_sort_last_in_original_order() -> None:
    someday = _task("1", "Someday", "someday")
    march = _task("2", "March", "2024-03-01")
    soon = _task("3", "Soon", "next week")
    january = _task("4", "January", "2024-01-15T09:30:00")

    result = derive([someday, march, soon, january], sort_key="deadline")

    assert result == (january, march, someday, soon)


def test_deadline_sort_handles_timezones() -> None:
    late_utc = _task("1", "Late", "2024-03-01T10:00:00+00:00")
    early_offset = _task("2", "Early", "2024-03-01T10:00:00+02:00")
    naive = _task("3", "Naive", "2024-03-01T09:00:00")

    result = derive([late_utc, early_offset, naive], sort_key="deadline")

    assert result == (early_offset, naive, late_utc)


def test_title_sort_ignores_case() -> None:
    tasks = [_task("1", "banana", "x"), _task("2", "Cherry", "x"), _task("3", "apple", "x")]

    assert _titles(derive(tasks, sort_key="title")) == ["apple", "banana", "Cherry"]


def test_derive_is_deterministic_and_does_not_mutate_input() -> None:
    tasks = [MILK, TAXES, _task("3", "Another", "bad date", completed=True)]
    snapshot = list(tasks)

    first = derive(tasks, "a", "all", "deadline")
    second = derive(tasks, "a", "all", "deadline")

    assert first == second
    assert isinstance(first, tuple)
    assert tasks == snapshot


def test_unknown_view_settings_are_rejected() -> None:
    with pytest.raises(ValueError):
        derive([MILK], completion_filter="archived")
    with pytest.raises(ValueError):
        derive([MILK], sort_key="created")


def test_task_filters_apply_uses_all_settings() -> None:
    filters = TaskFilters(search="i", completion=CompletionFilter.ACTIVE, sort_key=SortKey.DEADLINE)

    assert filters.apply([MILK, TAXES]) == (TAXES, MILK)
    assert TaskFilters().apply([MILK, TAXES]) == (TAXES, MILK)


def test_parse_deadline() -> None:
    assert parse_deadline(" 2024-03-20 ").isoformat() == "2024-03-20T00:00:00"
    assert parse_deadline("2024-02-30") is None
    assert parse_deadline("tomorrow") is None


def _accent_blind_strxfrm(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


@pytest.fixture
def utf8_collation():
    previous = locale.setlocale(locale.LC_COLLATE)
    for name in ("en_US.UTF-8", "en_US.utf8"):
        try:
            locale.setlocale(locale.LC_COLLATE, name)
            break
        except locale.Error:
            continue
    else:
        pytest.skip("no en_US UTF-8 collation locale installed")
    yield
    locale.setlocale(locale.LC_COLLATE, previous)


def test_title_sort_uses_locale_collation(monkeypatch) -> None:
    monkeypatch.setattr(locale, "strxfrm", _accent_blind_strxfrm)
    tasks = [_task("1", "zebra", "x"), _task("2", "Éclair", "x"), _task("3", "apple", "x")]

    assert _titles(derive(tasks, sort_key="title")) == ["apple", "Éclair", "zebra"]


def test_title_sort_with_system_locale(utf8_collation) -> None:
    tasks = [_task("1", "zebra", "x"), _task("2", "Éclair", "x"), _task("3", "apple", "x")]

    assert _titles(derive(tasks, sort_key="title")) == ["apple", "Éclair", "zebra"]


def test_empty_list_message() -> None:
    assert empty_list_message("") == "No tasks yet. Add one!"
    assert empty_list_message("   ") == "No tasks yet. Add one!"
    assert empty_list_message(" tax ") == "No tasks match your search"
