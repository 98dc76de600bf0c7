"""
Filter predicates for clan rankings.

Filters run against normalized snapshots. A record that could not be
normalized is represented by ``None`` here: it fails every active criterion
and passes only an empty filter set.
"""

from datetime import datetime, timedelta
from typing import Optional

from clan_scoring.constants import RankingConstants
from clan_scoring.data_models.clan import ClanSnapshot
from clan_scoring.data_models.ranking import RankingFilters
from clan_scoring.utils.scoring_exceptions import InvalidTimeframeError


def matches_category(clan: ClanSnapshot, category: str) -> bool:
    return clan.primary_category == category or category in clan.categories


def matches_location(clan: ClanSnapshot, location: str) -> bool:
    """Case-insensitive substring match."""
    return bool(clan.location) and location.lower() in clan.location.lower()


def matches_filters(clan: Optional[ClanSnapshot], filters: RankingFilters) -> bool:
    """True when the clan satisfies every active criterion."""
    if filters.is_empty:
        return True
    if clan is None:
        return False

    if filters.category and not matches_category(clan, filters.category):
        return False
    if filters.location and not matches_location(clan, filters.location):
        return False
    if filters.visibility and clan.visibility != filters.visibility:
        return False
    if filters.is_verified is not None and clan.is_verified != filters.is_verified:
        return False
    if filters.min_members and clan.member_count < filters.min_members:
        return False
    if filters.max_members and clan.member_count > filters.max_members:
        return False
    return True


def timeframe_start(timeframe: str, now: datetime) -> Optional[datetime]:
    """
    Earliest creation time kept for a timeframe.

    Args:
        timeframe: One of week, month, quarter, year, all
        now: Current time

    Returns:
        Window start, or None for "all"

    Raises:
        InvalidTimeframeError: If the timeframe is unknown
    """
    key = (timeframe or 'all').lower()
    if key not in RankingConstants.TIMEFRAME_DAYS:
        raise InvalidTimeframeError(timeframe, list(RankingConstants.TIMEFRAME_DAYS))
    days = RankingConstants.TIMEFRAME_DAYS[key]
    if days is None:
        return None
    return now - timedelta(days=days)


def created_within(clan: ClanSnapshot, start: Optional[datetime]) -> bool:
    """Clans with no creation time only pass an open window."""
    if start is None:
        return True
    return clan.created_at is not None and clan.created_at >= start


def is_publicly_listed(clan: ClanSnapshot) -> bool:
    return clan.is_active and clan.visibility == RankingConstants.PUBLIC_VISIBILITY


def is_featured_candidate(clan: ClanSnapshot, min_reputation: float) -> bool:
    """Verified clans, or unverified ones with enough reputation."""
    return clan.is_verified or clan.reputation_score >= min_reputation


def featured_sort_key(clan: ClanSnapshot) -> tuple:
    """
    Descending order key for featured listings.

    Verified first, then reputation score, average rating and newest
    creation time. Clans without a creation time sort last within a tie.

    Raises:
        TypeError, ValueError, AttributeError: If a field cannot be read as a number or time
    """
    created = clan.created_at.timestamp() if clan.created_at is not None else float('-inf')
    return (
        bool(clan.is_verified),
        float(clan.reputation_score),
        float(clan.average_rating),
        created,
    )
