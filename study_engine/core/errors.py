"""
Engine error taxonomy.

- InvalidInputError: malformed arguments, rejected before any computation
- OrderingViolationError: streak event older than the stored last active day
- UnknownReferenceError: id missing from its catalog (recoverable; raised
  only when a caller explicitly asks for strictness)
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from study_engine.core.models import StreakState


class EngineError(Exception):
    """Base class for every error raised by the engine."""
    pass


class InvalidInputError(EngineError, ValueError):
    """Raised when an argument is malformed or out of range."""
    pass


class OrderingViolationError(EngineError):
    """Raised when an activity date precedes the stored last active date.

    The state is left untouched; the caller decides whether to surface
    or discard the out-of-order event.
    """

    def __init__(self, state: StreakState, activity_date: date):
        self.state = state
        self.activity_date = activity_date
        super().__init__(
            f"Activity on {activity_date.isoformat()} precedes last active date "
            f"{state.last_active_date.isoformat() if state.last_active_date else None}"
        )


class UnknownReferenceError(EngineError):
    """Raised when ids reference nothing in their catalog."""

    def __init__(self, kind: str, ids: Iterable[str]):
        self.kind = kind
        self.ids = tuple(ids)
        super().__init__(f"Unknown {kind} reference(s): {', '.join(self.ids)}")
