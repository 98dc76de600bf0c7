"""
Base service class for the clan scoring engine.

Provides the injectable clock shared by every service, so results depend only
on their inputs and the clock they were given.
"""

from datetime import datetime
from typing import Optional

from clan_scoring.utils.clock import Clock, SystemClock, ensure_utc


class BaseService:
    """Base class for all services with clock management."""
    
    def __init__(self, clock: Optional[Clock] = None):
        """
        Initialize base service with a clock.
        
        Args:
            clock: Source of the current time (defaults to the system clock)
        """
        self.clock = clock or SystemClock()
    
    def current_time(self, now: Optional[datetime] = None) -> datetime:
        """Per-call `now` wins over the service clock."""
        if now is not None:
            return ensure_utc(now)
        return self.clock.now()
