"""
Ranking data models.

Provides immutable data transfer objects for score breakdowns, ranked clans
and paginated rankings.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, List, Mapping, Optional

from clan_scoring.data_models.clan import ClanSnapshot
from clan_scoring.utils.scoring_exceptions import InvalidFilterError, ScoringException


@dataclass(frozen=True)
class ScoreBreakdown:
    """Six sub-scores in [0, 100] and their weighted total."""
    activity: float
    reputation: float
    performance: float
    growth: float
    portfolio: float
    social: float
    total: float

    @classmethod
    def zero(cls) -> "ScoreBreakdown":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ScoringResult:
    """Outcome of scoring one clan; `error` is set when scoring failed."""
    score: float
    breakdown: ScoreBreakdown
    error: Optional[ScoringException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _optional_int(value, field_name: str) -> Optional[int]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise InvalidFilterError(field_name, "must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidFilterError(field_name, f"must be an integer, got {value!r}")


def _optional_bool(value, field_name: str) -> Optional[bool]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    raise InvalidFilterError(field_name, f"must be true or false, got {value!r}")


@dataclass(frozen=True)
class RankingFilters:
    """
    Optional ranking criteria, AND-combined.

    Empty strings and zero member bounds are treated as "not set".
    """
    category: Optional[str] = None
    location: Optional[str] = None
    visibility: Optional[str] = None
    is_verified: Optional[bool] = None
    min_members: Optional[int] = None
    max_members: Optional[int] = None

    def __post_init__(self):
        for name, value in (('category', self.category), ('location', self.location),
                            ('visibility', self.visibility)):
            if value is not None and not isinstance(value, str):
                raise InvalidFilterError(name, "must be text")
        if self.is_verified is not None and not isinstance(self.is_verified, bool):
            raise InvalidFilterError('isVerified', "must be true or false")
        for name, value in (('minMembers', self.min_members), ('maxMembers', self.max_members)):
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise InvalidFilterError(name, "must be an integer")
        if self.min_members and self.max_members and self.min_members > self.max_members:
            raise InvalidFilterError('minMembers', "cannot be greater than maxMembers")

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "RankingFilters":
        """Build filters from a camelCase mapping (query-string values accepted)."""
        if not data:
            return cls()
        if isinstance(data, RankingFilters):
            return data
        if not isinstance(data, Mapping):
            raise InvalidFilterError('filters', f"expected an object, got {type(data).__name__}")
        return cls(
            category=data.get('category') or None,
            location=data.get('location') or None,
            visibility=data.get('visibility') or None,
            is_verified=_optional_bool(data.get('isVerified'), 'isVerified'),
            min_members=_optional_int(data.get('minMembers'), 'minMembers'),
            max_members=_optional_int(data.get('maxMembers'), 'maxMembers'),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.category or self.location or self.visibility
                    or self.is_verified is not None
                    or self.min_members or self.max_members)

    def to_dict(self) -> dict:
        """Only the active criteria, camelCase."""
        result = {}
        if self.category:
            result['category'] = self.category
        if self.location:
            result['location'] = self.location
        if self.visibility:
            result['visibility'] = self.visibility
        if self.is_verified is not None:
            result['isVerified'] = self.is_verified
        if self.min_members:
            result['minMembers'] = self.min_members
        if self.max_members:
            result['maxMembers'] = self.max_members
        return result


@dataclass(frozen=True)
class RankedClan:
    """A clan with its score and dense rank within a filtered set."""
    source: Any
    snapshot: Optional[ClanSnapshot]
    score: float
    score_breakdown: ScoreBreakdown
    rank: int

    @property
    def clan_id(self):
        if self.snapshot is not None:
            return self.snapshot.id
        if isinstance(self.source, Mapping):
            return self.source.get('id')
        return None

    def _source_dict(self) -> dict:
        if isinstance(self.source, ClanSnapshot):
            return self.source.to_dict()
        if isinstance(self.source, Mapping):
            return dict(self.source)
        return {}

    def to_dict(self) -> dict:
        """Source fields merged with score, scoreBreakdown and rank."""
        result = self._source_dict()
        result['score'] = self.score
        result['scoreBreakdown'] = self.score_breakdown.to_dict()
        result['rank'] = self.rank
        return result

    def to_summary(self) -> dict:
        """Listing shape used by rankings endpoints."""
        snap = self.snapshot
        source = self._source_dict()
        created_at = snap.created_at.isoformat() if snap and snap.created_at else source.get('createdAt')
        if isinstance(created_at, datetime):
            created_at = created_at.isoformat()
        return {
            'id': self.clan_id,
            'name': snap.name if snap else source.get('name'),
            'slug': snap.slug if snap else source.get('slug'),
            'primaryCategory': snap.primary_category if snap else source.get('primaryCategory'),
            'categories': list(snap.categories) if snap else source.get('categories'),
            'location': snap.location if snap else source.get('location'),
            'averageRating': snap.average_rating if snap else source.get('averageRating'),
            'isVerified': snap.is_verified if snap else source.get('isVerified'),
            'memberCount': snap.member_count if snap else 0,
            'portfolioCount': snap.portfolio_count if snap else 0,
            'reviewCount': snap.review_count if snap else 0,
            'totalGigs': snap.total_gigs if snap else source.get('totalGigs'),
            'completedGigs': snap.completed_gigs if snap else source.get('completedGigs'),
            'createdAt': created_at,
            'score': self.score,
            'rank': self.rank,
            'scoreBreakdown': self.score_breakdown.to_dict(),
        }


@dataclass(frozen=True)
class RankingPosition:
    """Ranking positions recorded against a clan's analytics."""
    clan_id: Any
    market_ranking: int
    category_ranking: Optional[int] = None
    local_ranking: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'clanId': self.clan_id,
            'marketRanking': self.market_ranking,
            'categoryRanking': self.category_ranking,
            'localRanking': self.local_ranking,
        }


@dataclass(frozen=True)
class RankingsPage:
    """Paginated rankings data."""
    entries: List[RankedClan]
    positions: List[RankingPosition]
    current_page: int
    total_pages: int
    total_ranked: int
    page_size: int
    timeframe: str
    filters: RankingFilters
    generated_at: datetime

    def to_dict(self) -> dict:
        return {
            'data': [entry.to_summary() for entry in self.entries],
            'positions': [position.to_dict() for position in self.positions],
            'meta': {
                'page': self.current_page,
                'totalPages': self.total_pages,
                'pageSize': self.page_size,
                'totalRanked': self.total_ranked,
                'timeframe': self.timeframe,
                'filters': self.filters.to_dict(),
                'generated': self.generated_at.isoformat(),
            },
        }
