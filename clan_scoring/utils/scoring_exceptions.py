"""
Custom exceptions for the clan scoring engine with user-friendly error messages.
"""

class ScoringException(Exception):
    """Base exception for scoring-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class InvalidSnapshotError(ScoringException):
    """Raised when a clan record cannot be normalized into a snapshot."""
    def __init__(self, reason: str, clan_id=None):
        self.clan_id = clan_id
        label = f"clan '{clan_id}'" if clan_id is not None else "clan record"
        super().__init__(
            f"Invalid {label}: {reason}",
            f"❌ Clan data is incomplete or malformed: {reason}"
        )

class ScoringComputationError(ScoringException):
    """Raised when a sub-score calculator fails on a snapshot."""
    def __init__(self, component: str, clan_id=None, cause: Exception = None):
        self.component = component
        self.clan_id = clan_id
        self.cause = cause
        super().__init__(
            f"Failed to compute {component} score for clan '{clan_id}': {cause}",
            "❌ Could not score this clan."
        )

class InvalidFilterError(ScoringException):
    """Raised when ranking filters are malformed."""
    def __init__(self, field: str, reason: str):
        self.field = field
        super().__init__(
            f"Invalid filter '{field}': {reason}",
            f"❌ Invalid value for {field}: {reason}"
        )

class InvalidTimeframeError(ScoringException):
    """Raised when a rankings timeframe is not recognised."""
    def __init__(self, timeframe: str, allowed):
        self.timeframe = timeframe
        super().__init__(
            f"Unknown timeframe '{timeframe}'",
            f"❌ Timeframe must be one of: {', '.join(allowed)}"
        )
