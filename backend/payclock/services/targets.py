"""
Target (expected) hours per calendar period.

A user's expected hours come from a weekday-rate table: every weekday is
paid at ``daily_target_hours`` except the configured reduced weekdays
(Friday by default), which use ``friday_target_hours`` when set.
"""

from __future__ import annotations

import logging
import math
from calendar import monthrange
from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from payclock.core.config import settings
from payclock.core.exceptions import ConfigurationError
from payclock.schemas.user import UserPayProfile

logger = logging.getLogger(__name__)

WeekdayRates = Mapping[int, float]


def weekday_rates(
    user: UserPayProfile,
    reduced_weekdays: Iterable[int] | None = None,
) -> dict[int, float]:
    """Build the Monday=0 … Sunday=6 rate table for a user."""
    daily = user.daily_target_hours
    if not math.isfinite(daily) or daily <= 0:
        raise ConfigurationError(
            f"User {user.id}: daily_target_hours must be positive, got {daily}"
        )
    reduced = user.reduced_rate
    if not math.isfinite(reduced) or reduced < 0:
        raise ConfigurationError(
            f"User {user.id}: friday_target_hours must not be negative, got {reduced}"
        )

    if reduced_weekdays is None:
        reduced_weekdays = settings.REDUCED_WEEKDAYS
    reduced_set = set(reduced_weekdays)
    if not reduced_set <= set(range(7)):
        raise ConfigurationError(f"Reduced weekdays out of range 0..6: {sorted(reduced_set)}")

    return {wd: (reduced if wd in reduced_set else daily) for wd in range(7)}


def month_bounds(any_day: date) -> tuple[date, date]:
    _, last = monthrange(any_day.year, any_day.month)
    return date(any_day.year, any_day.month, 1), date(any_day.year, any_day.month, last)


def target_hours_between(rates: WeekdayRates, start: date, end: date) -> float:
    """Sum of the weekday rates over ``[start, end]`` inclusive."""
    missing = set(range(7)) - set(rates)
    if missing:
        raise ConfigurationError(f"Weekday rate table misses weekdays {sorted(missing)}")

    total = 0.0
    cur = start
    while cur <= end:
        total += rates[cur.weekday()]
        cur += timedelta(days=1)
    return total


def monthly_target(
    user: UserPayProfile,
    month_date: date,
    *,
    rates: WeekdayRates | None = None,
    reduced_weekdays: Iterable[int] | None = None,
) -> float:
    if rates is None:
        rates = weekday_rates(user, reduced_weekdays)
    first, last = month_bounds(month_date)
    target = target_hours_between(rates, first, last)
    logger.debug("Monthly target for user=%s %s: %.2fh", user.id, first.strftime("%Y-%m"), target)
    return target
