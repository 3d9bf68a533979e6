"""
Salary arithmetic.

effective rate = monthly salary / month target hours
gross          = worked hours × effective rate
net            = gross − penalties (no floor: over-penalisation shows as a
                 negative net)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta

from payclock.core.config import settings
from payclock.core.exceptions import ConfigurationError
from payclock.core.timezones import localize
from payclock.schemas.payroll import DailySalaryRow, SalaryFigures
from payclock.schemas.user import UserPayProfile
from payclock.services.targets import monthly_target

logger = logging.getLogger(__name__)


def effective_hourly_rate(monthly_salary: float | None, target_hours: float) -> float:
    if monthly_salary is None:
        raise ConfigurationError("Monthly salary is not configured")
    if not math.isfinite(monthly_salary) or monthly_salary < 0:
        raise ConfigurationError(f"Monthly salary must be a non-negative amount, got {monthly_salary}")
    if not math.isfinite(target_hours) or target_hours <= 0:
        raise ConfigurationError(
            f"Monthly target hours must be positive to derive an hourly rate, got {target_hours}"
        )
    return monthly_salary / target_hours


def compute_salary(
    target_hours: float,
    monthly_salary: float | None,
    worked_hours: float,
    total_penalties: float | None = None,
) -> SalaryFigures:
    rate = effective_hourly_rate(monthly_salary, target_hours)
    gross = worked_hours * rate
    penalties = total_penalties or 0.0
    logger.debug(
        "Salary: target=%.2fh worked=%.2fh rate=%.4f gross=%.2f penalties=%.2f",
        target_hours, worked_hours, rate, gross, penalties,
    )
    return SalaryFigures(
        target_hours=target_hours,
        worked_hours=worked_hours,
        effective_hourly_rate=rate,
        gross_salary=gross,
        total_penalties=penalties,
        net_salary=gross - penalties,
        is_prorated=worked_hours < target_hours,
    )


def _days(start: date, end: date) -> Iterable[date]:
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


def daily_breakdown(
    hours_per_day: Mapping[str, float],
    hourly_rate: float,
    date_from: date,
    date_to: date,
    penalties_by_day: Mapping[str, float] | None = None,
    *,
    money_decimals: int | None = None,
    hours_decimals: int | None = None,
) -> list[DailySalaryRow]:
    """
    One row per calendar day of the period.

    The period-level rate is applied to every day; it is never recomputed
    per day.
    """
    if money_decimals is None:
        money_decimals = settings.MONEY_DECIMALS
    if hours_decimals is None:
        hours_decimals = settings.HOURS_DECIMALS
    penalties_by_day = penalties_by_day or {}

    rows: list[DailySalaryRow] = []
    for day in _days(date_from, date_to):
        key = day.isoformat()
        hours = hours_per_day.get(key, 0.0)
        gross = hours * hourly_rate
        penalty = penalties_by_day.get(key, 0.0)
        rows.append(
            DailySalaryRow(
                day=day,
                weekday=day.strftime("%A"),
                hours_worked=round(hours, hours_decimals),
                gross=round(gross, money_decimals),
                penalty=round(penalty, money_decimals),
                net=round(gross - penalty, money_decimals),
            )
        )
    return rows


def live_earnings(
    user: UserPayProfile,
    clock_in: datetime,
    now: datetime,
    *,
    reduced_weekdays: Iterable[int] | None = None,
) -> float | None:
    """
    Money earned by an open session so far, at the rate of the current month.

    None when the user has no monthly salary configured.
    """
    if user.monthly_salary is None:
        return None
    target = monthly_target(user, now.date(), reduced_weekdays=reduced_weekdays)
    rate = effective_hourly_rate(user.monthly_salary, target)
    elapsed = max((localize(now) - localize(clock_in)).total_seconds(), 0.0)
    return elapsed / 3600 * rate
