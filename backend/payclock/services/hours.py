"""
Hours aggregation over paired attendance.

Two modes:
  - total:   one hour figure for the whole log
  - per_day: ``yyyy-mm-dd`` → hours, a session credited entirely to the
             day of its clock-in

Every day that carries a record of any status appears in per-day output,
so "present but 0h" can be told apart from "no record".
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, tzinfo
from typing import Literal

from payclock.core.timezones import localize, resolve_zone
from payclock.schemas.attendance import AttendanceRecord
from payclock.services.sessions import open_clock_in, pair_sessions

logger = logging.getLogger(__name__)

AggregationMode = Literal["total", "per_day"]
DayStatus = Literal["worked", "day_off", "absent"]


def day_key(instant: datetime, tz: str | tzinfo | None = None) -> str:
    """Calendar day of an instant; naive datetimes are taken as already local."""
    if instant.tzinfo is not None:
        instant = instant.astimezone(resolve_zone(tz))
    return instant.strftime("%Y-%m-%d")


def total_hours(
    records: Iterable[AttendanceRecord],
    *,
    live_until: datetime | None = None,
) -> float:
    return pair_sessions(records).worked_seconds(live_until) / 3600


def hours_by_day(
    records: Iterable[AttendanceRecord],
    *,
    live_until: datetime | None = None,
    tz: str | tzinfo | None = None,
) -> dict[str, float]:
    records = list(records)
    zone = resolve_zone(tz)

    seconds: dict[str, float] = {day_key(r.time, zone): 0.0 for r in records}

    result = pair_sessions(records)
    for session in result.sessions:
        seconds[day_key(session.clock_in, zone)] += session.seconds
    for credit in result.day_off_credits:
        seconds[day_key(credit.at, zone)] += credit.seconds
    if live_until is not None and result.open_clock_in is not None:
        elapsed = (localize(live_until) - result.open_clock_in).total_seconds()
        seconds[day_key(result.open_clock_in, zone)] += max(elapsed, 0.0)

    return {day: s / 3600 for day, s in sorted(seconds.items())}


def aggregate_hours(
    records: Iterable[AttendanceRecord],
    mode: AggregationMode = "total",
    *,
    live_until: datetime | None = None,
    tz: str | tzinfo | None = None,
) -> float | dict[str, float]:
    if mode == "total":
        return total_hours(records, live_until=live_until)
    if mode == "per_day":
        return hours_by_day(records, live_until=live_until, tz=tz)
    raise ValueError(f"Unknown aggregation mode: {mode!r}")


def daily_status(
    records: Iterable[AttendanceRecord],
    tz: str | tzinfo | None = None,
) -> dict[str, DayStatus]:
    """
    Heatmap status per day.

    day_off and absent always win over a worked day; among themselves the
    later record wins.
    """
    zone = resolve_zone(tz)
    statuses: dict[str, DayStatus] = {}
    for record in sorted(records, key=lambda r: (r.time, r.id)):
        day = day_key(record.time, zone)
        if record.status in ("day_off", "absent"):
            statuses[day] = record.status
        elif day not in statuses:
            statuses[day] = "worked"
    return dict(sorted(statuses.items()))


def _group_by_user(records: Iterable[AttendanceRecord]) -> dict[str, list[AttendanceRecord]]:
    grouped: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for record in records:
        grouped[record.user_id].append(record)
    return grouped


def hours_by_user(records: Iterable[AttendanceRecord]) -> dict[str, float]:
    """Total hours per user over a log that mixes several users."""
    return {
        user_id: total_hours(user_records)
        for user_id, user_records in _group_by_user(records).items()
    }


def top_employees(records: Iterable[AttendanceRecord], limit: int = 5) -> list[tuple[str, float]]:
    ranked = sorted(hours_by_user(records).items(), key=lambda kv: (-kv[1], kv[0]))
    return ranked[:limit]


def active_sessions(records: Iterable[AttendanceRecord]) -> dict[str, datetime]:
    """Users whose log ends with an open session, mapped to its clock-in."""
    active: dict[str, datetime] = {}
    for user_id, user_records in _group_by_user(records).items():
        clock_in = open_clock_in(user_records)
        if clock_in is not None:
            active[user_id] = clock_in
    logger.debug("Active sessions: %d", len(active))
    return active
