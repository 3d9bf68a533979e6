"""
Salary reports and task completion on top of an external store.

The store is whatever the host application persists to; it only has to
provide the async methods of ``PayrollStore``. All arithmetic is delegated
to the pure services, so a report computed here matches the figures any
other caller gets from the same snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import date, datetime, timezone
from typing import Protocol

from payclock.core.config import Settings, settings as default_settings
from payclock.core.exceptions import ConfigurationError, TaskNotFoundError, UserNotFoundError
from payclock.schemas.attendance import AttendanceRecord
from payclock.schemas.payroll import PenaltyAssessment, SalaryReport
from payclock.schemas.task import PenaltySetting, Task, TaskDraft, TaskStatus
from payclock.schemas.user import UserPayProfile
from payclock.services.hours import hours_by_day
from payclock.services.payroll import compute_salary, daily_breakdown, effective_hourly_rate
from payclock.services.penalties import assess_penalties
from payclock.services.recurrence import next_occurrence
from payclock.services.sessions import pair_sessions
from payclock.services.targets import monthly_target

logger = logging.getLogger(__name__)


class PayrollStore(Protocol):
    async def get_user(self, user_id: str) -> UserPayProfile | None: ...

    async def get_attendance(
        self, user_id: str, date_from: date, date_to: date
    ) -> Sequence[AttendanceRecord]: ...

    async def get_tasks(
        self, assignee_id: str, date_from: date, date_to: date
    ) -> Sequence[Task]: ...

    async def get_penalty_settings(self) -> Sequence[PenaltySetting]: ...

    async def get_task(self, task_id: str) -> Task | None: ...

    async def update_task_status(self, task_id: str, status: TaskStatus) -> Task: ...

    async def create_task(self, draft: TaskDraft) -> Task: ...


class SalaryReportService:
    def __init__(self, store: PayrollStore, *, settings: Settings | None = None):
        self._store = store
        self._settings = settings or default_settings

    async def build_report(
        self,
        user_id: str,
        date_from: date,
        date_to: date,
        *,
        monthly_salary: float | None = None,
        include_penalties: bool = True,
        as_of: datetime | None = None,
    ) -> SalaryReport:
        """
        Salary report for ``[date_from, date_to]``.

        Target hours are those of the month containing ``date_from``.
        ``monthly_salary`` overrides the stored salary of the user.
        ``as_of`` is the instant tasks are judged overdue against; it
        defaults to the wall clock.

        Penalties of tasks the store returns with a due day outside the
        period still count in ``total_penalties`` but have no row in
        ``days``, so the per-day nets need not add up to ``net_salary``.
        """
        if date_to < date_from:
            raise ValueError(f"date_to {date_to} is before date_from {date_from}")
        as_of = as_of or datetime.now(timezone.utc)
        cfg = self._settings

        user = await self._store.get_user(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        salary = monthly_salary if monthly_salary is not None else user.monthly_salary

        try:
            target = monthly_target(user, date_from, reduced_weekdays=cfg.REDUCED_WEEKDAYS)
            effective_hourly_rate(salary, target)
        except ConfigurationError as exc:
            logger.warning("Salary report for user=%s rejected: %s", user_id, exc)
            raise

        if include_penalties:
            attendance, tasks, penalty_rows = await asyncio.gather(
                self._store.get_attendance(user_id, date_from, date_to),
                self._store.get_tasks(user_id, date_from, date_to),
                self._store.get_penalty_settings(),
            )
            penalties = assess_penalties(tasks, penalty_rows, as_of, tz=cfg.TIMEZONE)
        else:
            attendance = await self._store.get_attendance(user_id, date_from, date_to)
            penalties = PenaltyAssessment()

        pairing = pair_sessions(attendance)
        worked = pairing.worked_seconds() / 3600
        figures = compute_salary(
            target, salary, worked, penalties.total if include_penalties else None
        )
        days = daily_breakdown(
            hours_by_day(attendance, tz=cfg.TIMEZONE),
            figures.effective_hourly_rate,
            date_from,
            date_to,
            penalties.by_day,
            money_decimals=cfg.MONEY_DECIMALS,
            hours_decimals=cfg.HOURS_DECIMALS,
        )

        money = cfg.MONEY_DECIMALS
        report = SalaryReport(
            user_id=user_id,
            date_from=date_from,
            date_to=date_to,
            as_of=as_of,
            monthly_salary=salary,
            target_hours=round(target, cfg.HOURS_DECIMALS),
            worked_hours=round(worked, cfg.HOURS_DECIMALS),
            effective_hourly_rate=round(figures.effective_hourly_rate, money),
            gross_salary=round(figures.gross_salary, money),
            total_penalties=round(figures.total_penalties, money),
            net_salary=round(figures.net_salary, money),
            is_prorated=figures.is_prorated,
            days=days,
            warnings=pairing.warnings,
        )
        logger.info(
            "Salary report built: user=%s period=%s..%s worked=%.2fh net=%.2f warnings=%d",
            user_id, date_from, date_to, worked, report.net_salary, len(report.warnings),
        )
        return report


class TaskCompletionService:
    def __init__(self, store: PayrollStore):
        self._store = store

    async def complete_task(
        self,
        task_id: str,
        *,
        completed_at: datetime | None = None,
    ) -> Task | None:
        """
        Mark a task completed and spawn its next occurrence.

        Only a real transition to ``completed`` spawns a task; completing an
        already completed task is a no-op. An invalid recurrence is rejected
        before anything is written. Returns the spawned task, if any.
        """
        completed_at = completed_at or datetime.now(timezone.utc)

        task = await self._store.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        if task.status == "completed":
            logger.info("Task %s already completed; nothing to spawn", task_id)
            return None

        draft = next_occurrence(task, completed_at)
        await self._store.update_task_status(task_id, "completed")
        if draft is None:
            return None

        created = await self._store.create_task(draft)
        logger.info(
            "Recurring task spawned: %s → %s (chain=%s, due=%s)",
            task_id, created.id, draft.original_task_id, draft.due_date,
        )
        return created
