"""
Time parsing utilities for clan snapshots.

Handles conversion of the timestamps the data-access layer hands over and the
whole-day/whole-month spans used by the recency and age bonuses.
"""

from datetime import datetime
from typing import Optional, Union
import math

from clan_scoring.utils.clock import ensure_utc

SECONDS_PER_DAY = 60 * 60 * 24


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a timestamp into an aware UTC datetime.
    
    Supported inputs:
    - datetime (naive values are treated as UTC)
    - ISO-8601 strings (e.g., 2025-01-31T12:00:00Z, 2025-01-31)
    - None or empty string (returns None)
    
    Args:
        value: Timestamp to parse
        
    Returns:
        Aware UTC datetime, or None if no timestamp was given
        
    Raises:
        ValueError: If the value is not a recognised timestamp
    """
    if value is None:
        return None
    
    if isinstance(value, datetime):
        return ensure_utc(value)
    
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp type: {type(value).__name__}")
    
    text = value.strip()
    if not text:
        return None
    
    # fromisoformat only accepts a trailing Z from Python 3.11 on
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid timestamp format: {value}") from e
    
    return ensure_utc(parsed)


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """
    Whole days from `earlier` to `later`, floored.
    
    Negative when `earlier` is in the future relative to `later`.
    """
    seconds = (ensure_utc(later) - ensure_utc(earlier)).total_seconds()
    return math.floor(seconds / SECONDS_PER_DAY)


def whole_months_between(earlier: datetime, later: datetime, days_per_month: int = 30) -> int:
    """Whole months from `earlier` to `later`, counting a month as `days_per_month` days."""
    seconds = (ensure_utc(later) - ensure_utc(earlier)).total_seconds()
    return math.floor(seconds / (SECONDS_PER_DAY * days_per_month))
