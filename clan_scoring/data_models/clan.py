"""
Clan snapshot data models.

Provides immutable records for the clan data the scoring engine reads. The
data-access layer hands clans over as loosely-shaped camelCase mappings
(``_count.members`` or a ``members`` list, ISO timestamp strings, optional
nested ``analytics``); ``ClanSnapshot.from_dict`` resolves all of that once,
so the calculators only ever see explicit fields.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from clan_scoring.config import Config
from clan_scoring.utils.scoring_exceptions import InvalidSnapshotError
from clan_scoring.utils.time_parser import parse_timestamp


def _number(data: Mapping, key: str, default=0, clan_id=None):
    """Read a numeric field; None means `default`, numeric strings are accepted."""
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidSnapshotError(f"{key} must be numeric, got {value!r}", clan_id)
    else:
        raise InvalidSnapshotError(f"{key} must be numeric, got {type(value).__name__}", clan_id)
    if isinstance(number, float) and (math.isnan(number) or math.isinf(number)):
        raise InvalidSnapshotError(f"{key} must be finite, got {value!r}", clan_id)
    return number


def _optional_number(data: Mapping, key: str, clan_id=None):
    if data.get(key) is None:
        return None
    return _number(data, key, clan_id=clan_id)


def _text(data: Mapping, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _items(data: Mapping, key: str, clan_id=None) -> tuple:
    value = data.get(key)
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise InvalidSnapshotError(f"{key} must be a list, got {type(value).__name__}", clan_id)
    return tuple(value)


def _mapping(value, key: str, clan_id=None) -> Mapping:
    if not isinstance(value, Mapping):
        raise InvalidSnapshotError(f"{key} entries must be objects, got {type(value).__name__}", clan_id)
    return value


def _timestamp(data: Mapping, key: str, clan_id=None) -> Optional[datetime]:
    try:
        return parse_timestamp(data.get(key))
    except ValueError as e:
        raise InvalidSnapshotError(f"{key}: {e}", clan_id) from e


def _resolve_count(data: Mapping, key: str, items: tuple, count_key: str, clan_id=None) -> int:
    """
    Resolve a related-record count.

    Order: a non-zero ``_count.<key>``, then the length of the ``<key>`` list,
    then an explicit ``<count_key>`` field, then 0.
    """
    counts = data.get('_count') or {}
    if not isinstance(counts, Mapping):
        raise InvalidSnapshotError(f"_count must be an object, got {type(counts).__name__}", clan_id)
    count = _number(counts, key, clan_id=clan_id)
    if count:
        return int(count)
    if items:
        return len(items)
    return int(_number(data, count_key, clan_id=clan_id))


@dataclass(frozen=True)
class Review:
    """Single public review of a clan (ratings on a 0-5 scale)."""
    rating: Optional[float] = None
    quality_rating: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping, clan_id=None) -> "Review":
        data = _mapping(data, 'reviews', clan_id)
        return cls(
            rating=_optional_number(data, 'rating', clan_id),
            quality_rating=_optional_number(data, 'qualityRating', clan_id),
        )


@dataclass(frozen=True)
class PortfolioItem:
    """Single public portfolio entry."""
    views: float = 0
    likes: float = 0
    is_featured: bool = False
    project_value: float = 0

    @classmethod
    def from_dict(cls, data: Mapping, clan_id=None) -> "PortfolioItem":
        data = _mapping(data, 'portfolio', clan_id)
        return cls(
            views=_number(data, 'views', clan_id=clan_id),
            likes=_number(data, 'likes', clan_id=clan_id),
            is_featured=bool(data.get('isFeatured')),
            project_value=_number(data, 'projectValue', clan_id=clan_id),
        )


@dataclass(frozen=True)
class ClanAnalytics:
    """Aggregated analytics row for a clan. Rates are fractions in [0, 1]."""
    profile_views: float = 0
    gig_win_rate: float = 0
    member_growth_rate: float = 0
    member_retention_rate: float = 0
    social_engagement: float = 0
    referral_count: float = 0
    last_activity_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping, clan_id=None) -> "ClanAnalytics":
        if not isinstance(data, Mapping):
            raise InvalidSnapshotError(f"analytics must be an object, got {type(data).__name__}", clan_id)
        return cls(
            profile_views=_number(data, 'profileViews', clan_id=clan_id),
            gig_win_rate=_number(data, 'gigWinRate', clan_id=clan_id),
            member_growth_rate=_number(data, 'memberGrowthRate', clan_id=clan_id),
            member_retention_rate=_number(data, 'memberRetentionRate', clan_id=clan_id),
            social_engagement=_number(data, 'socialEngagement', clan_id=clan_id),
            referral_count=_number(data, 'referralCount', clan_id=clan_id),
            last_activity_at=_timestamp(data, 'lastActivityAt', clan_id),
        )


@dataclass(frozen=True)
class ClanSnapshot:
    """Read-only view of a clan and its related records, as scored."""
    id: Any
    name: Optional[str] = None
    slug: Optional[str] = None

    # Flags
    is_active: bool = False
    is_verified: bool = False
    visibility: Optional[str] = None

    # Counters
    member_count: int = 0
    portfolio_count: int = 0
    review_count: int = 0
    total_gigs: float = 0
    completed_gigs: float = 0
    total_revenue: float = 0
    average_rating: float = 0
    reputation_score: float = 0
    max_members: Optional[int] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Related records
    reviews: Tuple[Review, ...] = ()
    portfolio: Tuple[PortfolioItem, ...] = ()
    portfolio_images: Tuple[Any, ...] = ()
    portfolio_videos: Tuple[Any, ...] = ()
    analytics: Optional[ClanAnalytics] = None

    # Social/contact presence
    instagram_handle: Optional[str] = None
    twitter_handle: Optional[str] = None
    linkedin_handle: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    timezone: Optional[str] = None

    # Categorisation
    primary_category: Optional[str] = None
    categories: Tuple[str, ...] = ()

    # Record the snapshot was built from, for output shaping
    source: Optional[Mapping] = field(default=None, compare=False, repr=False)

    @property
    def capacity(self) -> int:
        """Member capacity; a missing or zero maximum falls back to the default."""
        return self.max_members or Config.DEFAULT_MAX_MEMBERS

    @classmethod
    def from_any(cls, clan) -> "ClanSnapshot":
        """Accept an existing snapshot or normalize a mapping."""
        if isinstance(clan, ClanSnapshot):
            return clan
        if isinstance(clan, Mapping):
            return cls.from_dict(clan)
        raise InvalidSnapshotError(f"expected a clan object, got {type(clan).__name__}")

    @classmethod
    def from_dict(cls, data: Mapping) -> "ClanSnapshot":
        """
        Normalize a camelCase clan mapping.

        Raises:
            InvalidSnapshotError: If the mapping has no id or a field has the wrong type
        """
        if not isinstance(data, Mapping):
            raise InvalidSnapshotError(f"expected a clan object, got {type(data).__name__}")

        clan_id = data.get('id')
        if clan_id is None or clan_id == '':
            raise InvalidSnapshotError("missing clan id")

        members = _items(data, 'members', clan_id)
        reviews = tuple(Review.from_dict(r, clan_id) for r in _items(data, 'reviews', clan_id))
        portfolio = tuple(PortfolioItem.from_dict(p, clan_id) for p in _items(data, 'portfolio', clan_id))

        analytics = data.get('analytics')
        if analytics is not None:
            analytics = ClanAnalytics.from_dict(analytics, clan_id)

        max_members = _optional_number(data, 'maxMembers', clan_id)

        return cls(
            id=clan_id,
            name=_text(data, 'name'),
            slug=_text(data, 'slug'),
            is_active=bool(data.get('isActive')),
            is_verified=bool(data.get('isVerified')),
            visibility=_text(data, 'visibility'),
            member_count=_resolve_count(data, 'members', members, 'memberCount', clan_id),
            portfolio_count=_resolve_count(data, 'portfolio', portfolio, 'portfolioCount', clan_id),
            review_count=_resolve_count(data, 'reviews', reviews, 'reviewCount', clan_id),
            total_gigs=_number(data, 'totalGigs', clan_id=clan_id),
            completed_gigs=_number(data, 'completedGigs', clan_id=clan_id),
            total_revenue=_number(data, 'totalRevenue', clan_id=clan_id),
            average_rating=_number(data, 'averageRating', clan_id=clan_id),
            reputation_score=_number(data, 'reputationScore', clan_id=clan_id),
            max_members=int(max_members) if max_members is not None else None,
            created_at=_timestamp(data, 'createdAt', clan_id),
            updated_at=_timestamp(data, 'updatedAt', clan_id),
            reviews=reviews,
            portfolio=portfolio,
            portfolio_images=_items(data, 'portfolioImages', clan_id),
            portfolio_videos=_items(data, 'portfolioVideos', clan_id),
            analytics=analytics,
            instagram_handle=_text(data, 'instagramHandle'),
            twitter_handle=_text(data, 'twitterHandle'),
            linkedin_handle=_text(data, 'linkedinHandle'),
            website=_text(data, 'website'),
            email=_text(data, 'email'),
            location=_text(data, 'location'),
            timezone=_text(data, 'timezone'),
            primary_category=_text(data, 'primaryCategory'),
            categories=tuple(str(c) for c in _items(data, 'categories', clan_id)),
            source=data,
        )

    def to_dict(self) -> dict:
        """camelCase view of the snapshot; the source record when there is one."""
        if self.source is not None:
            return dict(self.source)
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'isActive': self.is_active,
            'isVerified': self.is_verified,
            'visibility': self.visibility,
            'memberCount': self.member_count,
            'portfolioCount': self.portfolio_count,
            'reviewCount': self.review_count,
            'totalGigs': self.total_gigs,
            'completedGigs': self.completed_gigs,
            'totalRevenue': self.total_revenue,
            'averageRating': self.average_rating,
            'reputationScore': self.reputation_score,
            'maxMembers': self.max_members,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
            'location': self.location,
            'primaryCategory': self.primary_category,
            'categories': list(self.categories),
        }
