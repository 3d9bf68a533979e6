"""
conftest.py — shared fixtures for the payroll engine tests.

Strategy:
- Every computation is pure, so fixtures are factories that build
  attendance records and tasks with sequential ids.
- Instants are timezone-aware UTC unless a test needs otherwise; the
  calendar-day zone is pinned to UTC for the whole session.
- The orchestration tests use an in-memory store implementing the
  PayrollStore protocol.
"""

from __future__ import annotations

import itertools
from datetime import date, datetime, timezone
from typing import Callable

import pytest

from payclock.core.config import settings
from payclock.schemas.attendance import AttendanceRecord
from payclock.schemas.task import PenaltySetting, Task, TaskDraft
from payclock.schemas.user import UserPayProfile

UTC = timezone.utc


def at(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


@pytest.fixture(autouse=True)
def utc_calendar(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "TIMEZONE", "UTC")
    monkeypatch.setattr(settings, "REDUCED_WEEKDAYS", [4])


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def record() -> Callable[..., AttendanceRecord]:
    ids = itertools.count(1)

    def _make(
        action: str,
        time: datetime,
        status: str = "present",
        *,
        user_id: str = "u1",
        paid_hours: float | None = None,
    ) -> AttendanceRecord:
        return AttendanceRecord(
            id=f"a{next(ids)}",
            user_id=user_id,
            action=action,
            time=time,
            status=status,
            paid_hours=paid_hours,
        )

    return _make


@pytest.fixture
def task() -> Callable[..., Task]:
    ids = itertools.count(1)

    def _make(**fields) -> Task:
        fields.setdefault("id", f"t{next(ids)}")
        fields.setdefault("title", "Water the plants")
        return Task(**fields)

    return _make


@pytest.fixture
def user() -> UserPayProfile:
    return UserPayProfile(
        id="u1",
        name="Dana",
        daily_target_hours=8,
        friday_target_hours=4,
        monthly_salary=4000,
    )


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------


class FakeStore:
    def __init__(
        self,
        *,
        users: list[UserPayProfile] = (),
        attendance: list[AttendanceRecord] = (),
        tasks: list[Task] = (),
        penalties: dict[str, float] | None = None,
    ):
        self.users = {u.id: u for u in users}
        self.attendance = list(attendance)
        self.tasks = {t.id: t for t in tasks}
        self.penalties = penalties or {}
        self.created: list[TaskDraft] = []
        self.calls: list[str] = []
        self._next_id = itertools.count(1)

    async def get_user(self, user_id: str) -> UserPayProfile | None:
        self.calls.append("get_user")
        return self.users.get(user_id)

    async def get_attendance(self, user_id: str, date_from: date, date_to: date):
        self.calls.append("get_attendance")
        return [
            r for r in self.attendance
            if r.user_id == user_id and date_from <= r.time.date() <= date_to
        ]

    async def get_tasks(self, assignee_id: str, date_from: date, date_to: date):
        self.calls.append("get_tasks")
        return [t for t in self.tasks.values() if t.assigned_to == assignee_id]

    async def get_penalty_settings(self):
        self.calls.append("get_penalty_settings")
        return [PenaltySetting(priority=p, amount=a) for p, a in self.penalties.items()]

    async def get_task(self, task_id: str) -> Task | None:
        return self.tasks.get(task_id)

    async def update_task_status(self, task_id: str, status: str) -> Task:
        self.calls.append("update_task_status")
        updated = self.tasks[task_id].model_copy(update={"status": status})
        self.tasks[task_id] = updated
        return updated

    async def create_task(self, draft: TaskDraft) -> Task:
        self.calls.append("create_task")
        self.created.append(draft)
        new_task = Task(
            id=f"spawned{next(self._next_id)}",
            **draft.model_dump(exclude={"idempotency_key"}),
        )
        self.tasks[new_task.id] = new_task
        return new_task
