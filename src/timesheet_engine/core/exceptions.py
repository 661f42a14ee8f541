from __future__ import annotations

from datetime import date


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidRangeError(ValidationError):
    """Raised when date bounds passed to a trigger or report are malformed."""


class StoreUnavailableError(DomainError):
    """Raised when the event store, directory or summary store cannot be reached.

    Callers apply their own retry policy; nothing in the engine retries.
    """


class PerEmployeeComputationFailed(DomainError):
    """One employee's weekly computation or upsert failed inside a batch run."""

    def __init__(self, employee_id: str, week_start: date, cause: BaseException):
        super().__init__(f"Timesheet for employee {employee_id} (week {week_start.isoformat()}) failed: {cause}")
        self.employee_id = employee_id
        self.week_start = week_start
        self.cause = cause


class TriggerTimeoutError(DomainError):
    """The manual trigger did not finish in time; the run keeps going in the background."""

    def __init__(self, week_start: date, timeout: float):
        super().__init__(
            f"Timesheet run for week {week_start.isoformat()} still running after {timeout:g}s; "
            "it will finish in the background"
        )
        self.week_start = week_start
        self.timeout = timeout
