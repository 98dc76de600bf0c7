"""
Services package for the clan scoring engine.
"""

from .base import BaseService
from .score_engine import ScoreEngine
from .rankings import RankingsService

__all__ = ['BaseService', 'ScoreEngine', 'RankingsService']
