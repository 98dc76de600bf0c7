"""
Clan scoring engine.

Scores marketplace clans from six weighted sub-scores and ranks them.
"""

from clan_scoring.data_models.clan import ClanSnapshot
from clan_scoring.data_models.ranking import (
    RankedClan, RankingFilters, RankingsPage, ScoreBreakdown, ScoringResult,
)
from clan_scoring.services.rankings import RankingsService
from clan_scoring.services.score_engine import (
    ScoreEngine, calculate_clan_score, get_score_breakdown, rank_clans, try_score_clan,
)

__version__ = "1.0.0"

__all__ = [
    'ClanSnapshot', 'RankedClan', 'RankingFilters', 'RankingsPage', 'ScoreBreakdown',
    'ScoringResult', 'RankingsService', 'ScoreEngine', 'calculate_clan_score',
    'get_score_breakdown', 'rank_clans', 'try_score_clan',
]
