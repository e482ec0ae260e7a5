from __future__ import annotations


class PlannerError(Exception):
    """Base for every failure the planner surfaces to the user."""

    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(PlannerError):
    """Rejected before any remote call was made."""


class RemoteFailure(PlannerError):
    retryable = True

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotAuthenticated(RemoteFailure):
    retryable = False

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, status_code=401)
