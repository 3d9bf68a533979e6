"""
Session pairing.

Turns an unordered attendance log of one user into closed work sessions,
day-off credits and integrity warnings. Records are sorted here, so the
caller may pass them in any order.

Rules:
  - present/in opens a session unless one is already open (the second
    "in" is ignored and reported as ``duplicate_in``)
  - present/out closes the open session; without one it is a no-op
    reported as ``orphan_out``
  - day_off contributes ``paid_hours`` hours regardless of session state
  - absent contributes nothing
  - a session still open at the end of the scan is left on the result as
    ``open_clock_in`` (and reported as ``unclosed_in``)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from payclock.schemas.attendance import (
    AttendanceRecord,
    DayOffCredit,
    IntegrityWarning,
    PairingResult,
    Session,
)

logger = logging.getLogger(__name__)


def _sorted(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    # id as tie-breaker keeps the scan deterministic for equal timestamps
    return sorted(records, key=lambda r: (r.time, r.id))


def _warn(kind: str, record_id: str, at: datetime, message: str) -> IntegrityWarning:
    logger.warning("Attendance integrity: %s (record=%s, at=%s)", message, record_id, at)
    return IntegrityWarning(kind=kind, record_id=record_id, at=at, message=message)


def pair_sessions(records: Iterable[AttendanceRecord]) -> PairingResult:
    sessions: list[Session] = []
    credits: list[DayOffCredit] = []
    warnings: list[IntegrityWarning] = []

    open_in: AttendanceRecord | None = None

    for record in _sorted(records):
        if record.status == "day_off":
            if record.paid_hours:
                credits.append(DayOffCredit(at=record.time, seconds=record.paid_hours * 3600))
            continue
        if record.status != "present":
            continue

        if record.action == "in":
            if open_in is None:
                open_in = record
            else:
                warnings.append(_warn(
                    "duplicate_in", record.id, record.time,
                    f"clock-in ignored, session open since {open_in.time.isoformat()}",
                ))
        elif open_in is None:
            warnings.append(_warn(
                "orphan_out", record.id, record.time, "clock-out without an open clock-in",
            ))
        else:
            sessions.append(Session(clock_in=open_in.time, clock_out=record.time))
            open_in = None

    if open_in is not None:
        warnings.append(_warn(
            "unclosed_in", open_in.id, open_in.time, "clock-in has no matching clock-out yet",
        ))

    logger.debug(
        "Paired %d session(s), %d day-off credit(s), open=%s",
        len(sessions), len(credits), open_in is not None,
    )
    return PairingResult(
        sessions=sessions,
        day_off_credits=credits,
        open_clock_in=open_in.time if open_in is not None else None,
        warnings=warnings,
    )


def open_clock_in(records: Iterable[AttendanceRecord]) -> datetime | None:
    """Clock-in instant of the session still running at the end of the log."""
    return pair_sessions(records).open_clock_in
