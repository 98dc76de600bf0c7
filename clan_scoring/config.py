import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Scoring engine configuration settings"""
    
    # Logging settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'False').lower() == 'true'
    
    # Clan defaults
    DEFAULT_MAX_MEMBERS = int(os.getenv('DEFAULT_MAX_MEMBERS', 50))
    
    # Rankings settings
    RANKINGS_DEFAULT_LIMIT = int(os.getenv('RANKINGS_DEFAULT_LIMIT', 50))
    RANKINGS_MAX_LIMIT = int(os.getenv('RANKINGS_MAX_LIMIT', 100))
    PAGE_SIZE_DEFAULT = int(os.getenv('PAGE_SIZE_DEFAULT', 20))
    FEATURED_LIMIT = int(os.getenv('FEATURED_LIMIT', 8))
    FEATURED_MIN_REPUTATION = float(os.getenv('FEATURED_MIN_REPUTATION', 10))
    
    @classmethod
    def clamp_limit(cls, limit, default=None):
        """Clamp a requested page size into [1, RANKINGS_MAX_LIMIT]"""
        if limit is None:
            limit = default if default is not None else cls.RANKINGS_DEFAULT_LIMIT
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            raise ValueError(f"Limit must be an integer, got {limit!r}")
        return min(cls.RANKINGS_MAX_LIMIT, max(1, limit))
    
    @classmethod
    def validate(cls):
        """Validate that configured values are usable"""
        if cls.DEFAULT_MAX_MEMBERS <= 0:
            raise ValueError("DEFAULT_MAX_MEMBERS must be positive")
        if cls.RANKINGS_MAX_LIMIT <= 0:
            raise ValueError("RANKINGS_MAX_LIMIT must be positive")
        if cls.RANKINGS_DEFAULT_LIMIT <= 0:
            raise ValueError("RANKINGS_DEFAULT_LIMIT must be positive")
        if cls.RANKINGS_DEFAULT_LIMIT > cls.RANKINGS_MAX_LIMIT:
            raise ValueError("RANKINGS_DEFAULT_LIMIT cannot exceed RANKINGS_MAX_LIMIT")
        if cls.PAGE_SIZE_DEFAULT <= 0:
            raise ValueError("PAGE_SIZE_DEFAULT must be positive")
        if cls.PAGE_SIZE_DEFAULT > cls.RANKINGS_MAX_LIMIT:
            raise ValueError("PAGE_SIZE_DEFAULT cannot exceed RANKINGS_MAX_LIMIT")
        if cls.FEATURED_LIMIT <= 0:
            raise ValueError("FEATURED_LIMIT must be positive")
