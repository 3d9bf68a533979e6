from pydantic import BaseModel, ConfigDict


class UserPayProfile(BaseModel):
    """Payroll-relevant fields of a user record."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
    daily_target_hours: float
    friday_target_hours: float | None = None
    monthly_salary: float | None = None

    @property
    def reduced_rate(self) -> float:
        if self.friday_target_hours is None:
            return self.daily_target_hours
        return self.friday_target_hours
