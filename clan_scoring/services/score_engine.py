"""
Clan score engine.

Combines the six sub-scores into a single 0-100 score and ranks collections
of clans by it. Scoring never raises on bad clan data: a record that cannot
be normalized or scored is logged and scored as 0.0. Callers that need to
tell the two apart use `try_score_clan`.
"""

import logging
import math
from datetime import datetime
from typing import Iterable, List, Mapping, Optional, Union

from clan_scoring.constants import WeightConstants, ScoreConstants
from clan_scoring.data_models.clan import ClanSnapshot
from clan_scoring.data_models.ranking import (
    RankedClan, RankingFilters, ScoreBreakdown, ScoringResult,
)
from clan_scoring.services.base import BaseService
from clan_scoring.utils.clock import Clock, resolve_clock
from clan_scoring.utils.filters import matches_filters
from clan_scoring.utils.scoring import SUB_SCORE_CALCULATORS, clamp
from clan_scoring.utils.scoring_exceptions import InvalidSnapshotError, ScoringComputationError

logger = logging.getLogger(__name__)

WEIGHTS = WeightConstants.as_dict()

if not math.isclose(sum(WEIGHTS.values()), 1.0):
    raise ValueError(f"Sub-score weights must sum to 1.0, got {sum(WEIGHTS.values())}")

ClanInput = Union[ClanSnapshot, Mapping]


def weighted_total(sub_scores: Mapping[str, float]) -> float:
    """Weighted sum of the sub-scores, clamped to [0, 100] and rounded to 4 places."""
    total = sum(sub_scores[name] * weight for name, weight in WEIGHTS.items())
    return round(clamp(total), ScoreConstants.DECIMAL_PLACES)


def _describe(clan) -> str:
    if isinstance(clan, ClanSnapshot):
        return str(clan.id)
    if isinstance(clan, Mapping):
        return str(clan.get('id'))
    return type(clan).__name__


def _passes_filters(clan, snapshot: Optional[ClanSnapshot], filters: RankingFilters) -> bool:
    """A snapshot whose fields cannot be compared fails every active filter."""
    try:
        return matches_filters(snapshot, filters)
    except (TypeError, AttributeError) as e:
        logger.warning(f"Excluding clan {_describe(clan)} from ranking: unreadable field ({e})")
        return False


class ScoreEngine(BaseService):
    """Scores and ranks clans against an injectable clock."""
    
    def try_score_clan(self, clan: ClanInput, now: Optional[datetime] = None) -> ScoringResult:
        """
        Score a clan, reporting failure instead of hiding it.
        
        Args:
            clan: ClanSnapshot or camelCase clan mapping
            now: Override of the service clock for this call
            
        Returns:
            ScoringResult with score 0.0 and `error` set when scoring failed
        """
        current = self.current_time(now)
        try:
            snapshot = ClanSnapshot.from_any(clan)
        except InvalidSnapshotError as e:
            logger.warning(f"Scoring clan {_describe(clan)} as 0: {e}")
            return ScoringResult(0.0, ScoreBreakdown.zero(), e)
        return self._score_snapshot(snapshot, current)
    
    def calculate_clan_score(self, clan: ClanInput, now: Optional[datetime] = None) -> float:
        """Final 0-100 score with 4 decimal places; 0.0 on any scoring error."""
        return self.try_score_clan(clan, now).score
    
    def get_score_breakdown(self, clan: ClanInput, now: Optional[datetime] = None) -> ScoreBreakdown:
        """All six sub-scores plus the total; all zeros on any scoring error."""
        return self.try_score_clan(clan, now).breakdown
    
    def rank_clans(self, clans: Iterable[ClanInput],
                   filters: Union[RankingFilters, Mapping, None] = None,
                   now: Optional[datetime] = None) -> List[RankedClan]:
        """
        Filter, score and rank clans.
        
        Args:
            clans: ClanSnapshots or clan mappings; never modified
            filters: RankingFilters or camelCase filter mapping
            now: Override of the service clock for this call
            
        Returns:
            RankedClans sorted by descending score, ranks 1..n over the filtered set
            
        Raises:
            InvalidFilterError: If the filters are malformed
        """
        filters = RankingFilters.from_dict(filters)
        current = self.current_time(now)
        
        scored = []
        for clan in clans:
            try:
                snapshot = ClanSnapshot.from_any(clan)
                error = None
            except InvalidSnapshotError as e:
                snapshot = None
                error = e
            
            if not _passes_filters(clan, snapshot, filters):
                continue
            
            if snapshot is None:
                logger.warning(f"Ranking clan {_describe(clan)} with score 0: {error}")
                result = ScoringResult(0.0, ScoreBreakdown.zero(), error)
            else:
                result = self._score_snapshot(snapshot, current)
            scored.append((clan, snapshot, result))
        
        # list.sort is stable, ties keep input order
        scored.sort(key=lambda item: item[2].score, reverse=True)
        
        logger.debug(f"Ranked {len(scored)} clans with filters {filters.to_dict()}")
        
        return [
            RankedClan(
                source=clan,
                snapshot=snapshot,
                score=result.score,
                score_breakdown=result.breakdown,
                rank=index + 1,
            )
            for index, (clan, snapshot, result) in enumerate(scored)
        ]
    
    def _score_snapshot(self, snapshot: ClanSnapshot, now: datetime) -> ScoringResult:
        sub_scores = {}
        for name, calculator in SUB_SCORE_CALCULATORS:
            try:
                sub_scores[name] = calculator(snapshot, now)
            except Exception as e:
                error = ScoringComputationError(name, snapshot.id, e)
                logger.error(f"Error calculating clan score: {error}", exc_info=True)
                return ScoringResult(0.0, ScoreBreakdown.zero(), error)
        
        total = weighted_total(sub_scores)
        return ScoringResult(total, ScoreBreakdown(total=total, **sub_scores))


def _engine(now: Optional[datetime], clock: Optional[Clock]) -> ScoreEngine:
    return ScoreEngine(resolve_clock(now, clock))


def try_score_clan(clan: ClanInput, now: Optional[datetime] = None,
                   clock: Optional[Clock] = None) -> ScoringResult:
    return _engine(now, clock).try_score_clan(clan)


def calculate_clan_score(clan: ClanInput, now: Optional[datetime] = None,
                         clock: Optional[Clock] = None) -> float:
    return _engine(now, clock).calculate_clan_score(clan)


def get_score_breakdown(clan: ClanInput, now: Optional[datetime] = None,
                        clock: Optional[Clock] = None) -> ScoreBreakdown:
    return _engine(now, clock).get_score_breakdown(clan)


def rank_clans(clans: Iterable[ClanInput], filters: Union[RankingFilters, Mapping, None] = None,
               now: Optional[datetime] = None, clock: Optional[Clock] = None) -> List[RankedClan]:
    return _engine(now, clock).rank_clans(clans, filters)
