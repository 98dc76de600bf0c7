"""
Tests for clan snapshot normalization.
"""

from datetime import datetime, timezone

import pytest

from clan_scoring.config import Config
from clan_scoring.data_models.clan import ClanAnalytics, ClanSnapshot, PortfolioItem, Review
from clan_scoring.utils.scoring_exceptions import InvalidSnapshotError

from conftest import make_clan, members


class TestCountResolution:

    def test_count_field_wins_over_list(self):
        snapshot = ClanSnapshot.from_dict(make_clan(_count={'members': 7}, members=members(2)))
        assert snapshot.member_count == 7

    def test_zero_count_falls_back_to_list(self):
        snapshot = ClanSnapshot.from_dict(make_clan(_count={'members': 0}, members=members(2)))
        assert snapshot.member_count == 2

    def test_explicit_count_field(self):
        snapshot = ClanSnapshot.from_dict(make_clan(memberCount=4, reviewCount=3, portfolioCount=2))
        assert (snapshot.member_count, snapshot.review_count, snapshot.portfolio_count) == (4, 3, 2)

    def test_nothing_means_zero(self):
        snapshot = ClanSnapshot.from_dict({'id': 1})
        assert snapshot.member_count == 0
        assert snapshot.review_count == 0
        assert snapshot.portfolio_count == 0

    def test_portfolio_and_review_counts(self):
        snapshot = ClanSnapshot.from_dict(make_clan(
            reviews=[{'rating': 4}], portfolio=[{'views': 1}, {'views': 2}], _count={'reviews': 9},
        ))
        assert snapshot.review_count == 9
        assert snapshot.portfolio_count == 2


class TestFieldParsing:

    def test_nested_records(self):
        snapshot = ClanSnapshot.from_dict(make_clan(
            reviews=[{'rating': 4.5, 'qualityRating': 4}],
            portfolio=[{'views': 10, 'likes': 2, 'isFeatured': True, 'projectValue': 500}],
            analytics={'profileViews': 100, 'gigWinRate': 0.25, 'lastActivityAt': '2025-05-01T00:00:00Z'},
        ))
        assert snapshot.reviews == (Review(rating=4.5, quality_rating=4),)
        assert snapshot.portfolio == (PortfolioItem(views=10, likes=2, is_featured=True, project_value=500),)
        assert snapshot.analytics.profile_views == 100
        assert snapshot.analytics.last_activity_at == datetime(2025, 5, 1, tzinfo=timezone.utc)

    def test_missing_analytics(self):
        assert ClanSnapshot.from_dict(make_clan()).analytics is None
        assert ClanAnalytics.from_dict({}) == ClanAnalytics()

    def test_timestamps(self):
        snapshot = ClanSnapshot.from_dict(make_clan(
            createdAt='2024-01-15T08:30:00Z', updatedAt=datetime(2025, 1, 1, 12, 0),
        ))
        assert snapshot.created_at == datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)
        assert snapshot.updated_at.tzinfo is not None

    def test_numeric_strings(self):
        snapshot = ClanSnapshot.from_dict(make_clan(averageRating='4.5', totalGigs='12'))
        assert snapshot.average_rating == 4.5
        assert snapshot.total_gigs == 12

    def test_null_numbers_are_zero(self):
        snapshot = ClanSnapshot.from_dict(make_clan(totalRevenue=None, averageRating=None))
        assert snapshot.total_revenue == 0
        assert snapshot.average_rating == 0

    def test_reputation_score(self):
        assert ClanSnapshot.from_dict(make_clan(reputationScore='12.5')).reputation_score == 12.5
        assert ClanSnapshot.from_dict(make_clan()).reputation_score == 0

    def test_categories_and_contacts(self):
        snapshot = ClanSnapshot.from_dict(make_clan(
            primaryCategory='design', categories=['design', 'video'], email='a@b.c', timezone='UTC',
        ))
        assert snapshot.categories == ('design', 'video')
        assert snapshot.email == 'a@b.c'
        assert snapshot.timezone == 'UTC'

    def test_capacity_default(self):
        assert ClanSnapshot.from_dict(make_clan()).capacity == Config.DEFAULT_MAX_MEMBERS
        assert ClanSnapshot.from_dict(make_clan(maxMembers=0)).capacity == Config.DEFAULT_MAX_MEMBERS
        assert ClanSnapshot.from_dict(make_clan(maxMembers=12)).capacity == 12

    def test_source_kept_for_output(self):
        record = make_clan(slug='test-clan')
        snapshot = ClanSnapshot.from_dict(record)
        assert snapshot.source is record
        assert snapshot.to_dict() == record
        assert snapshot.to_dict() is not record

    def test_from_any_passes_snapshots_through(self):
        snapshot = ClanSnapshot(id='x')
        assert ClanSnapshot.from_any(snapshot) is snapshot
        assert snapshot.to_dict()['id'] == 'x'


class TestInvalidSnapshots:

    @pytest.mark.parametrize("record", [
        {},
        {'id': None},
        {'id': ''},
        make_clan(averageRating='great'),
        make_clan(totalGigs=float('nan')),
        make_clan(reviews='five stars'),
        make_clan(reviews=[5]),
        make_clan(analytics=[1, 2]),
        make_clan(_count=3),
        make_clan(createdAt='last week'),
        make_clan(createdAt=1700000000),
    ])
    def test_rejected(self, record):
        with pytest.raises(InvalidSnapshotError):
            ClanSnapshot.from_dict(record)

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidSnapshotError):
            ClanSnapshot.from_any(['not', 'a', 'clan'])

    def test_error_carries_clan_id(self):
        with pytest.raises(InvalidSnapshotError) as excinfo:
            ClanSnapshot.from_dict(make_clan(id='bad-clan', averageRating='great'))
        assert excinfo.value.clan_id == 'bad-clan'
        assert 'averageRating' in str(excinfo.value)
        assert excinfo.value.user_message.startswith('❌')
