"""추천 엔진 단위 테스트 공통 픽스처

ORM 모델은 세션 없이 생성하므로 컬럼 기본값이 적용되지 않습니다.
팩토리에서 필요한 값을 모두 채웁니다.
"""

import itertools
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domains.behaviors.models import InteractionAction, InteractionEvent
from app.domains.contents.models import ContentItem, ContentType
from app.domains.promotions.models import SeasonalPromotion
from app.domains.recommendations.models import ABTest, RecommendationLog
from app.domains.users.models import UserProfile

# 봄 (3월), 오전 10시 UTC
FIXED_NOW = datetime(2026, 3, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_content():
    """ContentItem 팩토리"""
    ids = itertools.count(1)

    def _factory(
        content_id=None,
        tags=None,
        content_type=ContentType.ARTICLE,
        published_at=None,
        is_active=True,
        view_count=0,
        time_of_day_relevance=None,
    ) -> ContentItem:
        return ContentItem(
            id=content_id if content_id is not None else next(ids),
            title="테스트 콘텐츠",
            content_type=content_type,
            tags=list(tags or []),
            published_at=published_at or FIXED_NOW - timedelta(days=1),
            is_active=is_active,
            view_count=view_count,
            like_count=0,
            time_of_day_relevance=time_of_day_relevance,
        )

    return _factory


@pytest.fixture
def make_event():
    """InteractionEvent 팩토리"""

    def _factory(
        content_id,
        action=InteractionAction.VIEW,
        user_id=1,
        timestamp=None,
        duration=None,
        completion_rate=None,
    ) -> InteractionEvent:
        return InteractionEvent(
            user_id=user_id,
            content_id=content_id,
            action=action,
            duration=duration,
            completion_rate=completion_rate,
            timestamp=timestamp or FIXED_NOW,
        )

    return _factory


@pytest.fixture
def make_profile():
    """UserProfile 팩토리"""

    def _factory(
        user_id=1,
        constitution=None,
        health_goals=None,
        chronic_conditions=None,
        segments=None,
        region=None,
    ) -> UserProfile:
        return UserProfile(
            user_id=user_id,
            constitution=constitution,
            health_goals=list(health_goals or []),
            chronic_conditions=list(chronic_conditions or []),
            preference_tags=[],
            segments=list(segments or []),
            region=region,
        )

    return _factory


@pytest.fixture
def make_promotion():
    """SeasonalPromotion 팩토리"""
    ids = itertools.count(1)

    def _factory(
        promoted_content=None,
        boosted_tags=None,
        boosted_content_types=None,
        global_boost_factor=None,
        priority=1,
        target_user_segments=None,
        regions=None,
        is_automatic=False,
        start_date=None,
        end_date=None,
        is_active=True,
    ) -> SeasonalPromotion:
        promotion_id = next(ids)
        return SeasonalPromotion(
            id=promotion_id,
            name=f"promotion-{promotion_id}",
            start_date=start_date or FIXED_NOW - timedelta(days=7),
            end_date=end_date or FIXED_NOW + timedelta(days=7),
            is_active=is_active,
            priority=priority,
            promoted_content=list(promoted_content or []),
            boosted_tags=list(boosted_tags or []),
            boosted_content_types=list(boosted_content_types or []),
            target_user_segments=list(target_user_segments or []),
            regions=list(regions or []),
            global_boost_factor=global_boost_factor,
            is_automatic=is_automatic,
            impressions=0,
            clicks=0,
        )

    return _factory


@pytest.fixture
def make_log():
    """RecommendationLog 팩토리"""

    def _factory(
        content_ids,
        algorithm="hybrid",
        user_id=1,
        created_at=None,
        ab_test_id=None,
    ) -> RecommendationLog:
        return RecommendationLog(
            user_id=user_id,
            content_ids=list(content_ids),
            algorithm=algorithm,
            scores=[1.0] * len(content_ids),
            ab_test_id=ab_test_id,
            created_at=created_at or FIXED_NOW - timedelta(hours=1),
        )

    return _factory


@pytest.fixture
def make_ab_test():
    """ABTest 팩토리"""

    def _factory(
        ab_test_id=1,
        variants=None,
        target_user_percentage=100,
        start_date=None,
        end_date=None,
        is_active=True,
    ) -> ABTest:
        return ABTest(
            id=ab_test_id,
            name="알고리즘 비교",
            variants=variants
            or [
                {"name": "control", "algorithm": "hybrid"},
                {"name": "treatment", "algorithm": "content-based"},
            ],
            target_user_percentage=target_user_percentage,
            start_date=start_date or FIXED_NOW - timedelta(days=1),
            end_date=end_date,
            is_active=is_active,
            created_at=FIXED_NOW - timedelta(days=1),
        )

    return _factory


@pytest.fixture
def store():
    """리포지토리 메서드가 AsyncMock인 저장소

    기본값은 모두 "데이터 없음"입니다. 테스트에서 필요한 메서드만
    return_value / side_effect를 지정합니다.
    """
    store = MagicMock()

    store.contents.find = AsyncMock(return_value=[])
    store.contents.get_by_id = AsyncMock(return_value=None)
    store.contents.get_by_ids = AsyncMock(return_value=[])
    store.contents.increment_view_count = AsyncMock()
    store.contents.increment_like_count = AsyncMock()

    store.profiles.get_by_user_id = AsyncMock(return_value=None)

    store.behaviors.create = AsyncMock(side_effect=lambda event: event)
    store.behaviors.get_recent_by_user = AsyncMock(return_value=[])
    store.behaviors.get_by_user_and_contents = AsyncMock(return_value=[])
    store.behaviors.get_by_users_and_contents = AsyncMock(return_value=[])
    store.behaviors.get_user_content_pairs = AsyncMock(return_value=[])
    store.behaviors.get_content_sets = AsyncMock(return_value={})
    store.behaviors.get_recent_by_users = AsyncMock(return_value=[])
    store.behaviors.get_viewed_content_ids = AsyncMock(return_value=set())

    store.interests.get_by_user = AsyncMock(return_value=[])
    store.interests.increment = AsyncMock()

    store.promotions.get_active = AsyncMock(return_value=[])
    store.promotions.create = AsyncMock(side_effect=lambda p: p)
    store.promotions.increment_impressions = AsyncMock()

    store.logs.create = AsyncMock(side_effect=lambda log: log)
    store.logs.get_recent_by_user = AsyncMock(return_value=[])
    store.logs.get_by_test = AsyncMock(return_value=[])

    store.ab_tests.get_by_id = AsyncMock(return_value=None)
    store.ab_tests.get_list = AsyncMock(return_value=[])
    store.ab_tests.count = AsyncMock(return_value=0)
    store.ab_tests.create = AsyncMock(side_effect=lambda t: t)
    store.ab_tests.update = AsyncMock(side_effect=lambda t: t)
    return store


@pytest.fixture
def store_factory(store):
    """항상 같은 Mock 저장소를 여는 저장소 팩토리"""

    @asynccontextmanager
    async def _open():
        yield store

    return _open
