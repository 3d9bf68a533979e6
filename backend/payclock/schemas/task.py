from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

TaskStatus = Literal["not_started", "in_progress", "completed", "undone"]
TaskPriority = Literal["low", "medium", "high", "urgent"]
TaskRecurrence = Literal["none", "daily", "weekly", "monthly", "custom_days"]


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    description: str | None = None
    status: TaskStatus = "not_started"
    priority: TaskPriority = "medium"
    due_date: datetime | None = None
    created_by: str | None = None
    assigned_to: str | None = None
    recurrence_type: TaskRecurrence = "none"
    recurrence_interval: int | None = None
    original_task_id: str | None = None

    @field_validator("recurrence_interval")
    @classmethod
    def positive_interval(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("recurrence_interval must be a positive integer")
        return v


class TaskDraft(BaseModel):
    """A task record produced by the core, to be persisted by the caller."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str | None
    status: TaskStatus = "not_started"
    priority: TaskPriority
    due_date: datetime
    created_by: str | None
    assigned_to: str | None
    recurrence_type: TaskRecurrence
    recurrence_interval: int | None
    original_task_id: str
    # (task_id, completion instant) of the transition that spawned this draft
    idempotency_key: str


class PenaltySetting(BaseModel):
    priority: TaskPriority
    amount: float
