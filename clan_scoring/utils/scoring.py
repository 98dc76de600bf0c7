"""
Sub-score calculators for clan scoring.

Each calculator maps a ClanSnapshot to a score in [0, 100]. They are pure:
the only outside input is `now`, passed in by the caller.
"""

import math
from datetime import datetime
from typing import Sequence

from clan_scoring.constants import (
    ActivityConstants, ReputationConstants, PerformanceConstants,
    GrowthConstants, PortfolioConstants, SocialConstants, ScoreConstants,
)
from clan_scoring.data_models.clan import ClanSnapshot
from clan_scoring.utils.time_parser import whole_days_between, whole_months_between


def clamp(v: float, lo: float = ScoreConstants.MIN_SCORE, hi: float = ScoreConstants.MAX_SCORE) -> float:
    return max(min(v, hi), lo)


def log_points(value: float, multiplier: float, cap: float) -> float:
    """`multiplier * log10(value + 1)`, capped."""
    return min(cap, math.log10(value + 1) * multiplier)


def population_variance(numbers: Sequence[float]) -> float:
    """Mean of squared deviations from the mean; 0 for an empty sequence."""
    if not numbers:
        return 0.0
    mean = sum(numbers) / len(numbers)
    return sum((n - mean) ** 2 for n in numbers) / len(numbers)


def recency_points(clan: ClanSnapshot, now: datetime) -> int:
    """Points for how recently the clan was updated; missing timestamps count as a year old."""
    if clan.updated_at is None:
        days = ActivityConstants.MISSING_UPDATE_DAYS
    else:
        days = whole_days_between(clan.updated_at, now)
    for max_days, points in ActivityConstants.RECENCY_TIERS:
        if days <= max_days:
            return points
    return 0


def calculate_activity_score(clan: ClanSnapshot, now: datetime) -> float:
    score = 0.0

    if clan.is_active:
        score += ActivityConstants.ACTIVE_BONUS

    score += min(ActivityConstants.MEMBER_CAP, clan.member_count * ActivityConstants.POINTS_PER_MEMBER)
    score += recency_points(clan, now)

    if clan.analytics and clan.analytics.profile_views > 0:
        score += log_points(clan.analytics.profile_views,
                            ActivityConstants.PROFILE_VIEWS_MULTIPLIER,
                            ActivityConstants.PROFILE_VIEWS_CAP)

    if clan.is_verified:
        score += ActivityConstants.VERIFIED_BONUS

    return clamp(score)


def calculate_reputation_score(clan: ClanSnapshot, now: datetime = None) -> float:
    score = 0.0

    if clan.average_rating > 0:
        score += (clan.average_rating / ReputationConstants.RATING_SCALE) * ReputationConstants.RATING_POINTS

    score += min(ReputationConstants.REVIEW_CAP, clan.review_count * ReputationConstants.POINTS_PER_REVIEW)

    reviews = clan.reviews
    if reviews:
        # Reviews without a quality rating fall back to their plain rating
        total_quality = sum((r.quality_rating or r.rating or 0) for r in reviews)
        avg_quality = total_quality / len(reviews)
        score += (avg_quality / ReputationConstants.RATING_SCALE) * ReputationConstants.QUALITY_POINTS

    if len(reviews) > 1:
        ratings = [r.rating for r in reviews]
        # A review with no rating makes the variance undefined: no bonus
        if all(rating is not None for rating in ratings):
            if population_variance(ratings) < ReputationConstants.CONSISTENCY_MAX_VARIANCE:
                score += ReputationConstants.CONSISTENCY_BONUS

    return clamp(score)


def calculate_performance_score(clan: ClanSnapshot, now: datetime = None) -> float:
    score = 0.0

    if clan.total_gigs > 0:
        completion_rate = clan.completed_gigs / clan.total_gigs
        score += completion_rate * PerformanceConstants.COMPLETION_POINTS

    score += min(PerformanceConstants.COMPLETED_GIG_CAP,
                 clan.completed_gigs * PerformanceConstants.POINTS_PER_COMPLETED_GIG)

    if clan.total_revenue > 0:
        score += log_points(clan.total_revenue,
                            PerformanceConstants.REVENUE_MULTIPLIER,
                            PerformanceConstants.REVENUE_CAP)

    if clan.analytics and clan.analytics.gig_win_rate > 0:
        score += clan.analytics.gig_win_rate * PerformanceConstants.WIN_RATE_POINTS

    return clamp(score)


def calculate_growth_score(clan: ClanSnapshot, now: datetime) -> float:
    score = 0.0

    # Capacity ratio counts an empty clan as its founder alone
    member_count = clan.member_count or 1
    member_ratio = member_count / clan.capacity
    score += min(GrowthConstants.CAPACITY_POINTS, member_ratio * GrowthConstants.CAPACITY_POINTS)

    if clan.created_at is None:
        age_months = 0
    else:
        age_months = whole_months_between(clan.created_at, now, GrowthConstants.DAYS_PER_MONTH)

    if age_months < GrowthConstants.NEW_CLAN_MONTHS and member_count > GrowthConstants.NEW_CLAN_MIN_MEMBERS:
        score += GrowthConstants.NEW_CLAN_BONUS
    elif age_months >= GrowthConstants.NEW_CLAN_MONTHS:
        score += min(GrowthConstants.ESTABLISHED_CAP, age_months)

    analytics = clan.analytics
    if analytics and analytics.member_growth_rate > 0:
        score += min(GrowthConstants.GROWTH_RATE_POINTS,
                     analytics.member_growth_rate * GrowthConstants.GROWTH_RATE_POINTS)

    if analytics and analytics.member_retention_rate > 0:
        score += analytics.member_retention_rate * GrowthConstants.RETENTION_RATE_POINTS

    return clamp(score)


def calculate_portfolio_score(clan: ClanSnapshot, now: datetime = None) -> float:
    score = 0.0

    score += min(PortfolioConstants.ITEM_CAP, clan.portfolio_count * PortfolioConstants.POINTS_PER_ITEM)

    featured_count = sum(1 for item in clan.portfolio if item.is_featured)
    score += featured_count * PortfolioConstants.FEATURED_BONUS

    if clan.portfolio:
        total_views = sum(item.views for item in clan.portfolio)
        total_likes = sum(item.likes for item in clan.portfolio)
        score += log_points(total_views, PortfolioConstants.VIEWS_MULTIPLIER, PortfolioConstants.VIEWS_CAP)
        score += log_points(total_likes, PortfolioConstants.LIKES_MULTIPLIER, PortfolioConstants.LIKES_CAP)

    media_count = len(clan.portfolio_images) + len(clan.portfolio_videos)
    score += min(PortfolioConstants.MEDIA_CAP, media_count * PortfolioConstants.POINTS_PER_MEDIA)

    return clamp(score)


def calculate_social_score(clan: ClanSnapshot, now: datetime = None) -> float:
    score = 0.0

    handles = (clan.instagram_handle, clan.twitter_handle, clan.linkedin_handle, clan.website)
    score += sum(1 for handle in handles if handle) * SocialConstants.POINTS_PER_HANDLE

    analytics = clan.analytics
    if analytics and analytics.social_engagement > 0:
        score += min(SocialConstants.ENGAGEMENT_POINTS,
                     analytics.social_engagement * SocialConstants.ENGAGEMENT_POINTS)

    if analytics and analytics.referral_count > 0:
        score += min(SocialConstants.REFERRAL_CAP,
                     analytics.referral_count * SocialConstants.POINTS_PER_REFERRAL)

    if clan.email:
        score += SocialConstants.EMAIL_BONUS
    if clan.location:
        score += SocialConstants.LOCATION_BONUS
    if clan.timezone:
        score += SocialConstants.TIMEZONE_BONUS

    return clamp(score)


# Order matches ScoreBreakdown fields
SUB_SCORE_CALCULATORS = (
    ('activity', calculate_activity_score),
    ('reputation', calculate_reputation_score),
    ('performance', calculate_performance_score),
    ('growth', calculate_growth_score),
    ('portfolio', calculate_portfolio_score),
    ('social', calculate_social_score),
)
