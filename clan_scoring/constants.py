"""
Engine-wide constants for clan scoring.

This module contains all weights, caps and tier thresholds used by the
sub-score calculators so the formulas read as plain arithmetic.
"""

class WeightConstants:
    """Weights of the six sub-scores in the final clan score."""
    
    # Weights must sum to 1.0
    ACTIVITY_WEIGHT = 0.25
    REPUTATION_WEIGHT = 0.20
    PERFORMANCE_WEIGHT = 0.20
    GROWTH_WEIGHT = 0.15
    PORTFOLIO_WEIGHT = 0.10
    SOCIAL_WEIGHT = 0.10
    
    @classmethod
    def as_dict(cls):
        return {
            'activity': cls.ACTIVITY_WEIGHT,
            'reputation': cls.REPUTATION_WEIGHT,
            'performance': cls.PERFORMANCE_WEIGHT,
            'growth': cls.GROWTH_WEIGHT,
            'portfolio': cls.PORTFOLIO_WEIGHT,
            'social': cls.SOCIAL_WEIGHT,
        }

class ScoreConstants:
    """Bounds and precision of every score."""
    
    MIN_SCORE = 0.0
    MAX_SCORE = 100.0
    DECIMAL_PLACES = 4

class ActivityConstants:
    """Activity sub-score points."""
    
    ACTIVE_BONUS = 20
    POINTS_PER_MEMBER = 3
    MEMBER_CAP = 30
    
    # (max days since last update, points), checked in order
    RECENCY_TIERS = ((1, 20), (7, 15), (30, 10), (90, 5))
    MISSING_UPDATE_DAYS = 365
    
    PROFILE_VIEWS_MULTIPLIER = 5
    PROFILE_VIEWS_CAP = 20
    VERIFIED_BONUS = 10

class ReputationConstants:
    """Reputation sub-score points."""
    
    RATING_SCALE = 5.0
    RATING_POINTS = 50
    POINTS_PER_REVIEW = 2.5
    REVIEW_CAP = 25
    QUALITY_POINTS = 15
    CONSISTENCY_BONUS = 10
    CONSISTENCY_MAX_VARIANCE = 1.0

class PerformanceConstants:
    """Performance sub-score points."""
    
    COMPLETION_POINTS = 40
    POINTS_PER_COMPLETED_GIG = 2
    COMPLETED_GIG_CAP = 25
    REVENUE_MULTIPLIER = 5
    REVENUE_CAP = 20
    WIN_RATE_POINTS = 15

class GrowthConstants:
    """Growth sub-score points."""
    
    CAPACITY_POINTS = 30
    DAYS_PER_MONTH = 30
    NEW_CLAN_MONTHS = 6
    NEW_CLAN_MIN_MEMBERS = 3
    NEW_CLAN_BONUS = 20
    ESTABLISHED_CAP = 20
    GROWTH_RATE_POINTS = 25
    RETENTION_RATE_POINTS = 25

class PortfolioConstants:
    """Portfolio sub-score points."""
    
    POINTS_PER_ITEM = 8
    ITEM_CAP = 40
    FEATURED_BONUS = 10
    VIEWS_MULTIPLIER = 3
    VIEWS_CAP = 20
    LIKES_MULTIPLIER = 5
    LIKES_CAP = 20
    POINTS_PER_MEDIA = 2
    MEDIA_CAP = 20

class SocialConstants:
    """Social sub-score points."""
    
    POINTS_PER_HANDLE = 15
    ENGAGEMENT_POINTS = 30
    POINTS_PER_REFERRAL = 4
    REFERRAL_CAP = 20
    EMAIL_BONUS = 10
    LOCATION_BONUS = 5
    TIMEZONE_BONUS = 5

class RankingConstants:
    """Constants for rankings listings."""
    
    PUBLIC_VISIBILITY = "PUBLIC"
    
    # Creation-date windows in days; "all" has no window
    TIMEFRAME_DAYS = {
        'week': 7,
        'month': 30,
        'quarter': 90,
        'year': 365,
        'all': None,
    }
