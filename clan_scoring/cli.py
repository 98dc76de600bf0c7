"""
Command line interface for the clan scoring engine.

Reads clan records from a JSON file (or stdin with "-") and prints scores,
breakdowns or rankings as JSON.

    python -m clan_scoring score clans.json
    python -m clan_scoring rank clans.json --category design --page-size 20
    python -m clan_scoring rankings clans.json --timeframe month --now 2025-06-01T00:00:00Z
"""

import argparse
import json
import sys
from typing import List, Optional

from clan_scoring.config import Config
from clan_scoring.data_models.ranking import RankingFilters
from clan_scoring.services.rankings import RankingsService
from clan_scoring.services.score_engine import ScoreEngine
from clan_scoring.utils.clock import FixedClock, SystemClock
from clan_scoring.utils.logger import setup_logger
from clan_scoring.utils.scoring_exceptions import ScoringException
from clan_scoring.utils.time_parser import parse_timestamp


class CliError(ScoringException):
    """Raised when the command line input cannot be used."""


def load_clans(path: str) -> List[dict]:
    """Load a JSON list of clan records, or a single record, from a file or stdin."""
    try:
        if path == '-':
            data = json.load(sys.stdin)
        else:
            with open(path, encoding='utf-8') as handle:
                data = json.load(handle)
    except OSError as e:
        raise CliError(f"Cannot read {path}: {e}", f"❌ Cannot read {path}")
    except json.JSONDecodeError as e:
        raise CliError(f"Invalid JSON in {path}: {e}", f"❌ {path} is not valid JSON")

    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return data
    raise CliError(f"Expected a JSON list or object in {path}", "❌ Input must be a clan object or a list of clans")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='clan_scoring', description='Score and rank clans')
    parser.add_argument('--now', help='Fix the current time (ISO-8601) for reproducible output')

    subparsers = parser.add_subparsers(dest='command', required=True)

    score = subparsers.add_parser('score', help='Print the score of each clan')
    score.add_argument('file', help="JSON file of clan records, or - for stdin")

    breakdown = subparsers.add_parser('breakdown', help='Print the score breakdown of each clan')
    breakdown.add_argument('file', help="JSON file of clan records, or - for stdin")

    rank = subparsers.add_parser('rank', help='Rank clans with optional filters')
    rank.add_argument('file', help="JSON file of clan records, or - for stdin")
    rank.add_argument('--category')
    rank.add_argument('--location')
    rank.add_argument('--visibility')
    verified = rank.add_mutually_exclusive_group()
    verified.add_argument('--verified', dest='is_verified', action='store_const', const=True)
    verified.add_argument('--unverified', dest='is_verified', action='store_const', const=False)
    rank.add_argument('--min-members', type=int)
    rank.add_argument('--max-members', type=int)
    rank.add_argument('--page', type=int, default=1)
    rank.add_argument('--page-size', type=int, help=f'Defaults to {Config.PAGE_SIZE_DEFAULT}')

    rankings = subparsers.add_parser('rankings', help='Top public clans within a timeframe')
    rankings.add_argument('file', help="JSON file of clan records, or - for stdin")
    rankings.add_argument('--timeframe', default='all', help='week, month, quarter, year or all')
    rankings.add_argument('--category')
    rankings.add_argument('--location')
    rankings.add_argument('--limit', type=int, default=Config.RANKINGS_DEFAULT_LIMIT)

    return parser


def run(args: argparse.Namespace) -> object:
    """Execute a parsed command and return the JSON-serialisable result."""
    if args.now:
        try:
            clock = FixedClock(parse_timestamp(args.now))
        except (ValueError, TypeError) as e:
            raise CliError(f"Invalid --now value: {e}", f"❌ Invalid --now value: {args.now}")
    else:
        clock = SystemClock()

    clans = load_clans(args.file)
    engine = ScoreEngine(clock)

    if args.command == 'score':
        return [
            {'id': clan.get('id') if isinstance(clan, dict) else None,
             'score': engine.calculate_clan_score(clan)}
            for clan in clans
        ]

    if args.command == 'breakdown':
        return [
            {'id': clan.get('id') if isinstance(clan, dict) else None,
             'scoreBreakdown': engine.get_score_breakdown(clan).to_dict()}
            for clan in clans
        ]

    service = RankingsService(clock, engine)

    if args.command == 'rank':
        filters = RankingFilters(
            category=args.category,
            location=args.location,
            visibility=args.visibility,
            is_verified=args.is_verified,
            min_members=args.min_members,
            max_members=args.max_members,
        )
        return service.get_page(clans, filters, page=args.page, page_size=args.page_size).to_dict()

    return service.get_rankings(
        clans,
        timeframe=args.timeframe,
        category=args.category,
        location=args.location,
        limit=args.limit,
    ).to_dict()


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit code."""
    # Logs go to stderr so stdout stays valid JSON
    logger = setup_logger('clan_scoring', stream=sys.stderr)
    args = build_parser().parse_args(argv)

    try:
        Config.validate()
        result = run(args)
    except ScoringException as e:
        logger.error(str(e))
        print(e.user_message, file=sys.stderr)
        return 1
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0
