class PayClockError(Exception):
    """Base exception for attendance and payroll computations."""


class ConfigurationError(PayClockError):
    """Raised when user or payroll configuration makes a computation undefined."""


class InvalidRecurrenceError(ConfigurationError):
    """Raised when a recurring task cannot produce a next due date by rule."""


class UserNotFoundError(PayClockError):
    pass


class TaskNotFoundError(PayClockError):
    pass
