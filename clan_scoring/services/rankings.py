"""
Rankings service for clan listings.

Provides the listing logic built on top of the score engine: public-only
rankings over a creation timeframe, paginated rankings with arbitrary
filters, featured clans, and the market/category/local ranking positions the
caller stores against each clan's analytics.
"""

import logging
import math
from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Union

from clan_scoring.config import Config
from clan_scoring.data_models.clan import ClanSnapshot
from clan_scoring.data_models.ranking import (
    RankedClan, RankingFilters, RankingPosition, RankingsPage,
)
from clan_scoring.services.base import BaseService
from clan_scoring.services.score_engine import ClanInput, ScoreEngine
from clan_scoring.utils.clock import Clock
from clan_scoring.utils.filters import (
    created_within, featured_sort_key, is_featured_candidate, is_publicly_listed, timeframe_start,
)
from clan_scoring.utils.scoring_exceptions import InvalidFilterError, InvalidSnapshotError

logger = logging.getLogger(__name__)


def _clamp_page_size(page_size, field_name: str, default: Optional[int] = None) -> int:
    try:
        return Config.clamp_limit(page_size, default)
    except ValueError as e:
        raise InvalidFilterError(field_name, str(e))


def _clamp_page(page) -> int:
    try:
        return max(1, int(page))
    except (TypeError, ValueError):
        raise InvalidFilterError('page', f"must be an integer, got {page!r}")


def ranking_positions(entries: List[RankedClan], filters: RankingFilters) -> List[RankingPosition]:
    """Category and local positions are only meaningful under the matching filter."""
    return [
        RankingPosition(
            clan_id=entry.clan_id,
            market_ranking=entry.rank,
            category_ranking=entry.rank if filters.category else None,
            local_ranking=entry.rank if filters.location else None,
        )
        for entry in entries
    ]


class RankingsService(BaseService):
    """Service for clan rankings, pagination and featured listings."""

    def __init__(self, clock: Optional[Clock] = None, score_engine: Optional[ScoreEngine] = None):
        super().__init__(clock)
        self.score_engine = score_engine or ScoreEngine(self.clock)

    def _listable(self, clans: Iterable[ClanInput], start: Optional[datetime],
                  primary_category: Optional[str] = None) -> List[ClanSnapshot]:
        """Public, active clans created inside the window; unreadable records are skipped."""
        listable = []
        for clan in clans:
            try:
                snapshot = ClanSnapshot.from_any(clan)
            except InvalidSnapshotError as e:
                logger.warning(f"Skipping clan in rankings: {e}")
                continue
            try:
                listed = (is_publicly_listed(snapshot)
                          and created_within(snapshot, start)
                          and (not primary_category or snapshot.primary_category == primary_category))
            except (TypeError, AttributeError) as e:
                logger.warning(f"Skipping clan {snapshot.id} in rankings: unreadable field ({e})")
                continue
            if listed:
                listable.append(snapshot)
        return listable

    def get_rankings(self, clans: Iterable[ClanInput], timeframe: str = "all",
                     category: Optional[str] = None, location: Optional[str] = None,
                     limit=None, now: Optional[datetime] = None) -> RankingsPage:
        """
        Top public clans by score.

        Args:
            clans: Candidate clans (records or snapshots)
            timeframe: Creation window: week, month, quarter, year or all
            category: Optional primary category filter
            location: Optional location filter
            limit: Number of top clans to return, clamped to [1, RANKINGS_MAX_LIMIT]
            now: Override of the service clock for this call

        Returns:
            RankingsPage holding the top clans and their ranking positions
        """
        current = self.current_time(now)
        start = timeframe_start(timeframe, current)
        limit = _clamp_page_size(limit, 'limit')
        filters = RankingFilters(category=category or None, location=location or None)

        listable = self._listable(clans, start, filters.category)
        ranked = self.score_engine.rank_clans(listable, filters, now=current)
        top = ranked[:limit]

        logger.info(f"Rankings ({timeframe}): {len(ranked)} clans ranked, returning top {len(top)}")

        return RankingsPage(
            entries=top,
            positions=ranking_positions(top, filters),
            current_page=1,
            total_pages=1,
            total_ranked=len(ranked),
            page_size=limit,
            timeframe=(timeframe or 'all').lower(),
            filters=filters,
            generated_at=current,
        )

    def get_page(self, clans: Iterable[ClanInput],
                 filters: Union[RankingFilters, Mapping, None] = None,
                 page=1, page_size=None, now: Optional[datetime] = None) -> RankingsPage:
        """Paginated rankings over every clan matching `filters`."""
        current = self.current_time(now)
        filters = RankingFilters.from_dict(filters)
        page = _clamp_page(page)
        page_size = _clamp_page_size(page_size, 'pageSize', Config.PAGE_SIZE_DEFAULT)

        ranked = self.score_engine.rank_clans(clans, filters, now=current)
        total_pages = max(1, math.ceil(len(ranked) / page_size))
        offset = (page - 1) * page_size
        entries = ranked[offset:offset + page_size]

        return RankingsPage(
            entries=entries,
            positions=ranking_positions(entries, filters),
            current_page=page,
            total_pages=total_pages,
            total_ranked=len(ranked),
            page_size=page_size,
            timeframe='all',
            filters=filters,
            generated_at=current,
        )

    def get_featured(self, clans: Iterable[ClanInput], limit=None,
                     now: Optional[datetime] = None) -> List[RankedClan]:
        """
        Featured public clans.

        Keeps active public clans that are verified or have a reputation score
        of at least FEATURED_MIN_REPUTATION. The listing is curated rather than
        score-ranked: verified clans first, then reputation score, average
        rating and newest. Rank follows that order; each entry still carries
        its score.
        """
        current = self.current_time(now)
        limit = _clamp_page_size(limit, 'limit', Config.FEATURED_LIMIT)

        candidates = []
        for snapshot in self._listable(clans, None):
            try:
                if not is_featured_candidate(snapshot, Config.FEATURED_MIN_REPUTATION):
                    continue
                key = featured_sort_key(snapshot)
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping clan {snapshot.id} in featured listing: unreadable field ({e})")
                continue
            candidates.append((key, snapshot))

        # list.sort is stable, ties keep input order
        candidates.sort(key=lambda item: item[0], reverse=True)

        featured = []
        for index, (_, snapshot) in enumerate(candidates[:limit]):
            result = self.score_engine.try_score_clan(snapshot, now=current)
            featured.append(RankedClan(
                source=snapshot,
                snapshot=snapshot,
                score=result.score,
                score_breakdown=result.breakdown,
                rank=index + 1,
            ))
        return featured
