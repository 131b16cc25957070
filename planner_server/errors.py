# -*- coding: utf-8 -*-
"""Exceptions raised by the planner core."""


class PlannerError(Exception):
    """Base class for every failure the planner reports to its caller."""


class ValidationError(PlannerError):
    """Raised when an event, draft, or settings value is malformed."""


class NotFoundError(PlannerError):
    """Raised when an operation targets an event or user that does not exist."""


class PersistenceError(PlannerError):
    """Raised by storage backends when a blob cannot be read or written."""
