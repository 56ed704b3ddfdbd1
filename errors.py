# errors.py
"""Error types shared by the planner, the tracker and the event store."""


class FitPlanError(Exception):
    """Base class for all FitPlan errors."""


class InvalidInput(FitPlanError, ValueError):
    """Bad month/year or a malformed date. Raised before any store access."""


class StoreUnavailable(FitPlanError):
    """The workout event store could not be read or written."""


class RestDay(FitPlanError):
    """Completed/missed marks are only accepted for workout days."""

    def __init__(self, day):
        super().__init__(f"{day.isoformat()} is a rest day")
        self.day = day
