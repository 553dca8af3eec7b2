"""Exceptions raised by the scheduling core.

Only malformed input and programming errors are raised. Partial failures,
empty rosters and residual overlaps are returned as data on the result
objects so the caller can tell "the system broke" from "the schedule still
needs attention".
"""


class SchedulingError(Exception):
    """Base class for scheduling errors."""


class ValidationError(SchedulingError, ValueError):
    """Malformed input, rejected before anything is written."""


class InvalidTransitionError(SchedulingError):
    """A resolution session was moved to a state it cannot reach."""
