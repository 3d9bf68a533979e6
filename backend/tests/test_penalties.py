"""
Overdue task penalty tests.

Tests:
  - a high-priority task due yesterday costs the high penalty
  - completed, undated and not-yet-due tasks cost nothing
  - due today: overdue only once the due instant has passed
  - unconfigured priorities cost 0, per-day buckets use the due day
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from payclock.schemas.task import PenaltySetting
from payclock.services.penalties import assess_penalties, is_overdue, penalty_table
from tests.conftest import at

SETTINGS = [
    PenaltySetting(priority="low", amount=5),
    PenaltySetting(priority="medium", amount=10),
    PenaltySetting(priority="high", amount=50),
    PenaltySetting(priority="urgent", amount=100),
]


class TestAssessPenalties:
    def test_high_task_due_yesterday(self, task) -> None:
        now = at(2024, 3, 10, 12)
        tasks = [task(priority="high", due_date=now - timedelta(days=1), status="not_started")]
        result = assess_penalties(tasks, {"high": 50}, now)
        assert result.total == 50
        assert result.by_day == {"2024-03-09": 50}

    def test_wall_clock_default(self, task) -> None:
        yesterday = datetime.now(timezone.utc) - timedelta(days=1)
        assert assess_penalties([task(priority="high", due_date=yesterday)], {"high": 50}).total == 50

    def test_excluded_tasks(self, task) -> None:
        now = at(2024, 3, 10, 12)
        tasks = [
            task(priority="urgent", due_date=at(2024, 3, 1), status="completed"),
            task(priority="urgent", due_date=None),
            task(priority="urgent", due_date=at(2024, 3, 11)),
        ]
        result = assess_penalties(tasks, SETTINGS, now)
        assert result.total == 0
        assert result.by_day == {}
        assert result.overdue_task_ids == []

    def test_in_progress_and_undone_are_penalised(self, task) -> None:
        now = at(2024, 3, 10, 12)
        tasks = [
            task(id="a", priority="low", due_date=at(2024, 3, 2), status="in_progress"),
            task(id="b", priority="medium", due_date=at(2024, 3, 2), status="undone"),
            task(id="c", priority="urgent", due_date=at(2024, 3, 5)),
        ]
        result = assess_penalties(tasks, SETTINGS, now)
        assert result.total == 115
        assert result.by_day == {"2024-03-02": 15, "2024-03-05": 100}
        assert result.overdue_task_ids == ["a", "b", "c"]

    def test_unconfigured_priority_costs_nothing(self, task) -> None:
        now = at(2024, 3, 10)
        tasks = [task(priority="low", due_date=at(2024, 3, 1)), task(priority="high", due_date=at(2024, 3, 1))]
        assert assess_penalties(tasks, {"high": 50}, now).total == 50

    def test_no_tasks(self) -> None:
        result = assess_penalties([], SETTINGS, at(2024, 3, 10))
        assert result.total == 0
        assert result.by_day == {}


class TestOverdue:
    def test_due_later_today_is_not_overdue(self, task) -> None:
        assert not is_overdue(task(due_date=at(2024, 3, 10, 18)), at(2024, 3, 10, 12))

    def test_due_earlier_today_is_overdue(self, task) -> None:
        assert is_overdue(task(due_date=at(2024, 3, 10, 9)), at(2024, 3, 10, 12))

    def test_due_exactly_now_is_not_overdue(self, task) -> None:
        assert not is_overdue(task(due_date=at(2024, 3, 10, 12)), at(2024, 3, 10, 12))

    def test_naive_due_date_is_local(self, task) -> None:
        t = task(due_date=datetime(2024, 3, 10, 11))
        assert is_overdue(t, at(2024, 3, 10, 12))
        assert not is_overdue(t, at(2024, 3, 10, 12), tz=timezone(timedelta(hours=-2)))


def test_penalty_table_from_rows() -> None:
    assert penalty_table(SETTINGS) == {"low": 5, "medium": 10, "high": 50, "urgent": 100}
    assert penalty_table({"high": 1.5}) == {"high": 1.5}


@pytest.mark.parametrize("priority", ["low", "medium", "high", "urgent"])
def test_each_priority_uses_its_amount(task, priority: str) -> None:
    now = at(2024, 3, 10)
    result = assess_penalties([task(priority=priority, due_date=at(2024, 3, 1))], SETTINGS, now)
    assert result.total == penalty_table(SETTINGS)[priority]
