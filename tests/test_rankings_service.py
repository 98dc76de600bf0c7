"""
Tests for the rankings service: public rankings, pagination and featured clans.
"""

import pytest

from clan_scoring.data_models.clan import ClanSnapshot
from clan_scoring.services.rankings import RankingsService
from clan_scoring.utils.scoring_exceptions import InvalidFilterError, InvalidTimeframeError

from conftest import NOW, days_ago, make_clan


def public(clan_id: str, rating: float = 3, **overrides) -> dict:
    fields = dict(id=clan_id, averageRating=rating, isActive=True, visibility='PUBLIC',
                  createdAt=days_ago(10))
    fields.update(overrides)
    return make_clan(**fields)


@pytest.fixture
def service(clock):
    return RankingsService(clock)


class TestGetRankings:

    def test_only_public_active_clans(self, service):
        clans = [
            public('pub'),
            public('private', visibility='PRIVATE'),
            public('inactive', isActive=False),
            {'name': 'unreadable'},
        ]
        page = service.get_rankings(clans)
        assert [e.clan_id for e in page.entries] == ['pub']
        assert page.total_ranked == 1

    @pytest.mark.parametrize("timeframe, expected", [
        ('week', ['new']),
        ('month', ['new', 'recent']),
        ('quarter', ['new', 'recent', 'older']),
        ('year', ['new', 'recent', 'older', 'old']),
        ('all', ['new', 'recent', 'older', 'old', 'ancient', 'undated']),
    ])
    def test_timeframes(self, service, timeframe, expected):
        clans = [
            public('new', rating=5, createdAt=days_ago(3)),
            public('recent', rating=4, createdAt=days_ago(20)),
            public('older', rating=3, createdAt=days_ago(80)),
            public('old', rating=2, createdAt=days_ago(300)),
            public('ancient', rating=1, createdAt=days_ago(900)),
            public('undated', rating=0, createdAt=None),
        ]
        page = service.get_rankings(clans, timeframe=timeframe)
        assert [e.clan_id for e in page.entries] == expected
        assert page.timeframe == timeframe

    def test_unknown_timeframe(self, service):
        with pytest.raises(InvalidTimeframeError) as excinfo:
            service.get_rankings([public('a')], timeframe='decade')
        assert 'week' in excinfo.value.user_message

    def test_limit_clamped(self, service):
        clans = [public(str(i), rating=i % 5) for i in range(120)]
        assert len(service.get_rankings(clans, limit=0).entries) == 1
        assert len(service.get_rankings(clans, limit=500).entries) == 100
        assert len(service.get_rankings(clans).entries) == 50
        assert service.get_rankings(clans, limit=10).total_ranked == 120

    def test_unreadable_creation_time_skipped(self, service, caplog):
        bad = ClanSnapshot(id='bad', is_active=True, visibility='PUBLIC', created_at='2025-01-01')
        page = service.get_rankings([bad, public('ok')], timeframe='year')
        assert [e.clan_id for e in page.entries] == ['ok']
        assert "Skipping clan bad" in caplog.text

    def test_category_matches_primary_only(self, service):
        clans = [
            public('primary', primaryCategory='design'),
            public('secondary', primaryCategory='video', categories=['design']),
        ]
        page = service.get_rankings(clans, category='design')
        assert [e.clan_id for e in page.entries] == ['primary']

    def test_invalid_limit(self, service):
        with pytest.raises(InvalidFilterError):
            service.get_rankings([public('a')], limit='ten')

    def test_positions_follow_active_filters(self, service):
        clans = [
            public('a', rating=5, primaryCategory='design', location='Lisbon'),
            public('b', rating=4, primaryCategory='design', location='Porto'),
        ]
        market = service.get_rankings(clans)
        assert [(p.clan_id, p.market_ranking, p.category_ranking, p.local_ranking)
                for p in market.positions] == [('a', 1, None, None), ('b', 2, None, None)]

        by_category = service.get_rankings(clans, category='design')
        assert [p.category_ranking for p in by_category.positions] == [1, 2]
        assert all(p.local_ranking is None for p in by_category.positions)

        local = service.get_rankings(clans, location='porto')
        assert [(p.clan_id, p.local_ranking) for p in local.positions] == [('b', 1)]

    def test_to_dict_shape(self, service):
        result = service.get_rankings([public('a', slug='clan-a', members=[{}, {}])]).to_dict()
        entry = result['data'][0]
        assert entry['id'] == 'a'
        assert entry['slug'] == 'clan-a'
        assert entry['memberCount'] == 2
        assert entry['rank'] == 1
        assert result['meta']['totalRanked'] == 1
        assert result['meta']['generated'] == NOW.isoformat()
        assert result['positions'][0]['marketRanking'] == 1


class TestGetPage:

    def test_pagination(self, service):
        clans = [make_clan(id=f'c{i}', averageRating=5 - i) for i in range(5)]
        page = service.get_page(clans, page=3, page_size=2)
        assert [e.clan_id for e in page.entries] == ['c4']
        assert page.entries[0].rank == 5
        assert page.total_pages == 3
        assert page.total_ranked == 5
        assert page.current_page == 3

    def test_page_clamped_to_first(self, service):
        clans = [make_clan(id=f'c{i}', averageRating=5 - i) for i in range(3)]
        page = service.get_page(clans, page=0, page_size=2)
        assert page.current_page == 1
        assert [e.rank for e in page.entries] == [1, 2]

    def test_page_beyond_end_is_empty(self, service):
        page = service.get_page([make_clan()], page=4, page_size=10)
        assert page.entries == []
        assert page.total_pages == 1

    def test_default_page_size(self, service):
        clans = [make_clan(id=f'c{i}') for i in range(30)]
        page = service.get_page(clans)
        assert len(page.entries) == 20
        assert page.page_size == 20
        assert page.total_pages == 2

    def test_empty_input_has_one_page(self, service):
        page = service.get_page([])
        assert page.total_pages == 1
        assert page.total_ranked == 0

    def test_filters_applied(self, service):
        clans = [make_clan(id='v', isVerified=True), make_clan(id='u')]
        page = service.get_page(clans, {'isVerified': True})
        assert [e.clan_id for e in page.entries] == ['v']
        assert page.to_dict()['meta']['filters'] == {'isVerified': True}

    def test_invalid_page(self, service):
        with pytest.raises(InvalidFilterError):
            service.get_page([make_clan()], page='first')


class TestGetFeatured:

    def test_verified_or_reputable_public_clans(self, service):
        clans = [
            public('verified', isVerified=True),
            public('reputable', reputationScore=10),
            public('unknown', reputationScore=9.5),
            public('hidden', isVerified=True, visibility='PRIVATE'),
            public('inactive', reputationScore=50, isActive=False),
        ]
        featured = service.get_featured(clans)
        assert [c.clan_id for c in featured] == ['verified', 'reputable']

    def test_curated_order(self, service):
        clans = [
            public('reputable-high', rating=5, reputationScore=80),
            public('verified-old', rating=4, isVerified=True, createdAt=days_ago(200)),
            public('verified-rated', rating=5, isVerified=True),
            public('verified-new', rating=4, isVerified=True, createdAt=days_ago(2)),
            public('verified-reputable', rating=1, isVerified=True, reputationScore=30),
        ]
        featured = service.get_featured(clans)
        assert [(c.clan_id, c.rank) for c in featured] == [
            ('verified-reputable', 1),
            ('verified-rated', 2),
            ('verified-new', 3),
            ('verified-old', 4),
            ('reputable-high', 5),
        ]

    def test_rank_follows_listing_not_score(self, service):
        # Verified outranks a higher-scoring reputable clan
        strong = public('strong', rating=5, reputationScore=10, members=[{}] * 20, totalGigs=10, completedGigs=10)
        weak = public('weak', rating=1, isVerified=True)
        featured = service.get_featured([strong, weak])
        assert [c.clan_id for c in featured] == ['weak', 'strong']
        assert featured[1].score > featured[0].score
        assert featured[0].score_breakdown.total == featured[0].score

    def test_unreadable_reputation_skipped(self, service):
        bad = ClanSnapshot(id='bad', is_active=True, visibility='PUBLIC', is_verified=True,
                           reputation_score='high')
        featured = service.get_featured([bad, public('ok', isVerified=True)])
        assert [c.clan_id for c in featured] == ['ok']

    def test_featured_limit(self, service):
        clans = [public(str(i), isVerified=True) for i in range(12)]
        assert len(service.get_featured(clans)) == 8
        assert len(service.get_featured(clans, limit=3)) == 3
