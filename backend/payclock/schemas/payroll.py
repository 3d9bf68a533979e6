from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from payclock.schemas.attendance import IntegrityWarning


class SalaryFigures(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_hours: float
    worked_hours: float
    effective_hourly_rate: float
    gross_salary: float
    total_penalties: float
    net_salary: float
    is_prorated: bool


class PenaltyAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: float = 0.0
    by_day: dict[str, float] = {}
    overdue_task_ids: list[str] = []


class DailySalaryRow(BaseModel):
    day: date
    weekday: str
    hours_worked: float
    gross: float
    penalty: float
    net: float


class SalaryReport(BaseModel):
    user_id: str
    date_from: date
    date_to: date
    as_of: datetime
    monthly_salary: float
    target_hours: float
    worked_hours: float
    effective_hourly_rate: float
    gross_salary: float
    total_penalties: float
    net_salary: float
    is_prorated: bool
    days: list[DailySalaryRow]
    warnings: list[IntegrityWarning]
