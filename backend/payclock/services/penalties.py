"""
Penalties for overdue tasks.

A task is overdue when its due instant lies strictly before ``now`` and it
is not completed. A task due later today is not overdue yet; one whose due
instant already passed today is.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone, tzinfo

from payclock.core.timezones import resolve_zone
from payclock.schemas.payroll import PenaltyAssessment
from payclock.schemas.task import PenaltySetting, Task, TaskPriority
from payclock.services.hours import day_key

logger = logging.getLogger(__name__)


def penalty_table(
    rows: Iterable[PenaltySetting] | Mapping[TaskPriority, float],
) -> dict[TaskPriority, float]:
    if isinstance(rows, Mapping):
        return dict(rows)
    return {row.priority: row.amount for row in rows}


def _aligned(due: datetime, now: datetime, zone: tzinfo) -> tuple[datetime, datetime]:
    # naive instants are local to the configured zone
    if due.tzinfo is None and now.tzinfo is not None:
        due = due.replace(tzinfo=zone)
    elif now.tzinfo is None and due.tzinfo is not None:
        now = now.replace(tzinfo=zone)
    return due, now


def is_overdue(task: Task, now: datetime, tz: str | tzinfo | None = None) -> bool:
    if task.due_date is None or task.status == "completed":
        return False
    due, ref = _aligned(task.due_date, now, resolve_zone(tz))
    return due < ref


def assess_penalties(
    tasks: Iterable[Task],
    penalty_settings: Iterable[PenaltySetting] | Mapping[TaskPriority, float],
    now: datetime | None = None,
    *,
    tz: str | tzinfo | None = None,
) -> PenaltyAssessment:
    """
    Sum penalties of overdue tasks, also bucketed by the due day.

    ``now`` defaults to the wall clock; pin it for reproducible reports.
    Priorities missing from ``penalty_settings`` cost nothing.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    table = penalty_table(penalty_settings)
    zone = resolve_zone(tz)

    total = 0.0
    by_day: dict[str, float] = {}
    overdue_ids: list[str] = []

    for task in tasks:
        if not is_overdue(task, now, zone):
            continue
        amount = table.get(task.priority, 0.0)
        total += amount
        day = day_key(task.due_date, zone)
        by_day[day] = by_day.get(day, 0.0) + amount
        overdue_ids.append(task.id)

    logger.debug("Penalties as of %s: %d overdue task(s), total=%.2f", now, len(overdue_ids), total)
    return PenaltyAssessment(total=total, by_day=dict(sorted(by_day.items())), overdue_task_ids=overdue_ids)
