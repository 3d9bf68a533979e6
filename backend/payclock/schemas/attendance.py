from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from payclock.core.timezones import localize

AttendanceAction = Literal["in", "out"]
AttendanceStatus = Literal["present", "absent", "day_off"]
WarningKind = Literal["orphan_out", "duplicate_in", "unclosed_in"]


class AttendanceRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    action: AttendanceAction
    time: datetime
    status: AttendanceStatus = "present"
    paid_hours: float | None = None
    notes: str | None = None

    @field_validator("time")
    @classmethod
    def local_time(cls, v: datetime) -> datetime:
        return localize(v)

    @field_validator("paid_hours")
    @classmethod
    def non_negative(cls, v: float | None) -> float | None:
        if v is not None and v < 0:
            raise ValueError("paid_hours must not be negative")
        return v


class Session(BaseModel):
    """A closed clock-in/clock-out pair: worked time is [clock_in, clock_out)."""

    model_config = ConfigDict(frozen=True)

    clock_in: datetime
    clock_out: datetime

    @property
    def seconds(self) -> float:
        return (self.clock_out - self.clock_in).total_seconds()


class DayOffCredit(BaseModel):
    model_config = ConfigDict(frozen=True)

    at: datetime
    seconds: float


class IntegrityWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: WarningKind
    record_id: str
    at: datetime
    message: str


class PairingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    sessions: list[Session] = []
    day_off_credits: list[DayOffCredit] = []
    open_clock_in: datetime | None = None
    warnings: list[IntegrityWarning] = []

    def worked_seconds(self, live_until: datetime | None = None) -> float:
        """
        Closed sessions plus day-off credits.

        When ``live_until`` is given and a session is still open, the time
        elapsed since its clock-in is added as well. A naive ``live_until``
        is read in the configured zone.
        """
        total = sum(s.seconds for s in self.sessions)
        total += sum(c.seconds for c in self.day_off_credits)
        if live_until is not None and self.open_clock_in is not None:
            total += max((localize(live_until) - self.open_clock_in).total_seconds(), 0.0)
        return total
