"""Shared fixtures for the clan scoring tests."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from clan_scoring.utils.clock import FixedClock

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


def make_clan(**overrides) -> dict:
    """A minimal, valid clan record in the data-access layer's camelCase shape."""
    clan = {
        'id': 'clan-1',
        'name': 'Test Clan',
        'isActive': False,
        'isVerified': False,
        'averageRating': 0,
        'totalGigs': 0,
        'completedGigs': 0,
        'reviews': [],
        'portfolio': [],
        'analytics': None,
    }
    clan.update(overrides)
    return clan


def members(count: int) -> list:
    return [{'id': f'member-{i}', 'role': 'MEMBER'} for i in range(count)]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def clan_factory():
    return make_clan


@pytest.fixture(autouse=True)
def reset_cli_logger():
    """The CLI attaches a handler to the package logger; drop it between tests."""
    yield
    logger = logging.getLogger('clan_scoring')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
