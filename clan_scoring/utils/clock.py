"""
Clock abstraction for deterministic scoring.

Two sub-scores depend on the current time (update recency and clan age).
Every scoring entry point takes its "now" from a Clock so tests can pin it.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
    """Abstract interface for the engine's notion of current time."""
    
    @abstractmethod
    def now(self) -> datetime:
        """Get current UTC datetime."""
        pass


class SystemClock(Clock):
    """Production clock using actual system time (UTC)."""
    
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Clock frozen at a given instant.
    
    Naive datetimes are treated as UTC.
    """
    
    def __init__(self, at_time: Optional[datetime] = None):
        self._time = ensure_utc(at_time or datetime.now(timezone.utc))
    
    def now(self) -> datetime:
        return self._time
    
    def set_time(self, new_time: datetime) -> None:
        """Set the current time."""
        self._time = ensure_utc(new_time)
    
    def advance(self, seconds: float = 0, **kwargs) -> None:
        """
        Advance time by the specified amount.
        
        Args:
            seconds: Number of seconds to advance
            **kwargs: Passed to timedelta (hours, minutes, days, etc.)
        """
        self._time = self._time + timedelta(seconds=seconds, **kwargs)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_clock(now=None, clock: Optional[Clock] = None) -> Clock:
    """Pick the clock for a call: an explicit `now` wins over `clock`."""
    if now is not None:
        return FixedClock(now)
    return clock or SystemClock()
