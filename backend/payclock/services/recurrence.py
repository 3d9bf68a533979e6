"""
Recurring task scheduling.

When a recurring task is completed, the next occurrence is due:
  daily        +1 day
  weekly       +7 days
  monthly      +1 calendar month, day-of-month clamped to the month length
  custom_days  +recurrence_interval days (a positive integer is required)

Every task of a chain points at the chain's first task via
``original_task_id``.
"""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import datetime, timedelta

from payclock.core.exceptions import InvalidRecurrenceError
from payclock.schemas.task import Task, TaskDraft

logger = logging.getLogger(__name__)


def add_month(value: datetime) -> datetime:
    year, month = (value.year + 1, 1) if value.month == 12 else (value.year, value.month + 1)
    _, last = monthrange(year, month)
    return value.replace(year=year, month=month, day=min(value.day, last))


def validate_recurrence(task: Task) -> None:
    if task.recurrence_type != "custom_days":
        return
    interval = task.recurrence_interval
    if interval is None:
        raise InvalidRecurrenceError(
            f"Task {task.id}: custom_days recurrence needs an interval"
        )


def next_due_date(task: Task) -> datetime | None:
    """Due date of the next occurrence, or None when there is none to schedule."""
    validate_recurrence(task)
    if task.recurrence_type == "none" or task.due_date is None:
        return None

    due = task.due_date
    if task.recurrence_type == "daily":
        return due + timedelta(days=1)
    if task.recurrence_type == "weekly":
        return due + timedelta(weeks=1)
    if task.recurrence_type == "monthly":
        return add_month(due)
    return due + timedelta(days=task.recurrence_interval)


def next_occurrence(task: Task, completion_date: datetime) -> TaskDraft | None:
    """
    Draft of the task that follows ``task`` once it is completed.

    Must be called once per transition to ``completed``; the draft carries
    an idempotency key built from the task id and ``completion_date`` so
    the storage layer can refuse a second spawn for the same transition.
    """
    due = next_due_date(task)
    if due is None:
        logger.debug("Task %s: no next occurrence (recurrence=%s)", task.id, task.recurrence_type)
        return None

    return TaskDraft(
        title=task.title,
        description=task.description,
        status="not_started",
        priority=task.priority,
        due_date=due,
        created_by=task.created_by,
        assigned_to=task.assigned_to,
        recurrence_type=task.recurrence_type,
        recurrence_interval=task.recurrence_interval,
        original_task_id=task.original_task_id or task.id,
        idempotency_key=f"{task.id}:{completion_date.isoformat()}",
    )
