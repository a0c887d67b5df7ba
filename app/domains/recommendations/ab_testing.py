"""추천 알고리즘 A/B 테스트

사용자 ID의 32비트 문자열 해시로 변형을 결정적으로 배정하며,
테스트 기간 동안 같은 사용자는 항상 같은 변형을 받습니다.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.core.utils.datetime import now_utc
from app.domains.behaviors.models import InteractionAction
from app.domains.recommendations.exceptions import (
    ABTestNotFoundException,
    InvalidABTestException,
)
from app.domains.recommendations.models import ABTest
from app.domains.recommendations.schemas import ABTestCreate
from app.domains.recommendations.store import RecommendationStore
from app.domains.recommendations.types import (
    RUNNABLE_ALGORITHMS,
    AlgorithmChoice,
    RecommendationAlgorithm,
)

logger = get_logger(__name__)

DEFAULT_TEST_DURATION = timedelta(days=30)


def simple_hash(value: str) -> int:
    """32비트 문자열 해시 (h = h * 31 + code, 부호 있는 32비트 래핑 후 절대값)"""
    h = 0
    for ch in value:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def is_in_test_population(test: ABTest, user_id: int) -> bool:
    """사용자가 테스트 대상 비율 안에 속하는지 여부"""
    percentage = test.target_user_percentage or 100
    if percentage >= 100:
        return True
    return simple_hash(f"{test.id}:{user_id}") % 100 < percentage


def assign_variant(test: ABTest, user_id: int) -> Optional[dict[str, Any]]:
    """사용자에게 변형 배정 (변형이 없으면 None)"""
    variants = test.variants or []
    if not variants:
        return None
    return variants[simple_hash(str(user_id)) % len(variants)]


async def resolve_ab_test_choice(
    store: RecommendationStore,
    ab_test_id: int,
    user_id: int,
    now: Optional[datetime] = None,
) -> Optional[AlgorithmChoice]:
    """A/B 테스트 기반 알고리즘 선택

    테스트가 없거나 비활성/기간 외이거나 사용자가 대상 비율 밖이면
    None을 반환하고, 호출자는 과거 성과 기반 선택으로 진행합니다.
    """
    test = await store.ab_tests.get_by_id(ab_test_id)
    if test is None or not test.is_running(now or now_utc()):
        return None
    if not is_in_test_population(test, user_id):
        return None

    variant = assign_variant(test, user_id)
    if variant is None:
        return None

    return AlgorithmChoice(
        algorithm=RecommendationAlgorithm.parse(
            variant.get("algorithm"), RecommendationAlgorithm.HYBRID
        ),
        ab_test_id=test.id,
        ab_test_variant=variant.get("name"),
    )


class ABTestService:
    """A/B 테스트 관리 서비스"""

    def __init__(self, session: AsyncSession):
        self.store = RecommendationStore(session)

    async def create_ab_test(self, data: ABTestCreate) -> ABTest:
        """A/B 테스트 생성

        Raises:
            InvalidABTestException: 변형이 2개 미만, 이름 중복,
                실행할 수 없는 알고리즘, 또는 종료 일시가 시작 이전인 경우
        """
        if len(data.variants) < 2:
            raise InvalidABTestException("변형은 2개 이상이어야 합니다.")

        names = [v.name for v in data.variants]
        if len(set(names)) != len(names):
            raise InvalidABTestException(
                "변형 이름이 중복되었습니다.", detail={"variants": names}
            )

        runnable = {a.value for a in RUNNABLE_ALGORITHMS}
        unknown = [v.algorithm for v in data.variants if v.algorithm not in runnable]
        if unknown:
            raise InvalidABTestException(
                "지원하지 않는 알고리즘입니다.",
                detail={"algorithms": unknown, "supported": sorted(runnable)},
            )

        start_date = data.start_date or now_utc()
        end_date = data.end_date or start_date + DEFAULT_TEST_DURATION
        if end_date <= start_date:
            raise InvalidABTestException(
                "종료 일시는 시작 일시 이후여야 합니다.",
                detail={
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                },
            )

        ab_test = ABTest(
            name=data.name,
            description=data.description,
            variants=[v.model_dump() for v in data.variants],
            target_user_percentage=data.target_user_percentage,
            start_date=start_date,
            end_date=end_date,
            is_active=True,
        )
        created = await self.store.ab_tests.create(ab_test)

        logger.info(
            f"A/B test created: {created.id}",
            extra={
                "request_id": get_request_id(),
                "ab_test_id": created.id,
                "variants": names,
            },
        )
        return created

    async def get_ab_test(self, ab_test_id: int) -> ABTest:
        """A/B 테스트 조회

        Raises:
            ABTestNotFoundException: 테스트를 찾을 수 없는 경우
        """
        ab_test = await self.store.ab_tests.get_by_id(ab_test_id)
        if not ab_test:
            raise ABTestNotFoundException(ab_test_id=ab_test_id)
        return ab_test

    async def get_ab_tests(
        self, page: int = 1, size: int = 20, active_only: bool = False
    ) -> tuple[list[ABTest], int]:
        """A/B 테스트 목록 조회"""
        skip = (page - 1) * size
        tests = await self.store.ab_tests.get_list(
            skip=skip, limit=size, active_only=active_only
        )
        total = await self.store.ab_tests.count(active_only=active_only)
        return list(tests), total

    async def deactivate_ab_test(self, ab_test_id: int) -> ABTest:
        """A/B 테스트 비활성화"""
        ab_test = await self.get_ab_test(ab_test_id)
        ab_test.is_active = False
        updated = await self.store.ab_tests.update(ab_test)

        logger.info(
            f"A/B test deactivated: {ab_test_id}",
            extra={"request_id": get_request_id(), "ab_test_id": ab_test_id},
        )
        return updated

    async def get_ab_test_results(self, ab_test_id: int) -> dict[str, Any]:
        """A/B 테스트 결과 집계

        테스트 기간 내 추천 로그를 알고리즘별로 묶고, 해당 사용자들이
        추천된 콘텐츠에 보인 행동을 집계합니다.

        Args:
            ab_test_id: A/B 테스트 ID

        Returns:
            test, results(알고리즘별 지표), start_date, end_date, is_active

        Raises:
            ABTestNotFoundException: 테스트를 찾을 수 없는 경우
        """
        ab_test = await self.get_ab_test(ab_test_id)
        start = ab_test.start_date
        end = ab_test.end_date or now_utc()

        logs = [
            log
            for log in await self.store.logs.get_by_test(ab_test_id)
            if start <= log.created_at <= end
        ]

        logs_by_algorithm: dict[str, list] = defaultdict(list)
        for log in logs:
            logs_by_algorithm[log.algorithm].append(log)

        recommended_ids = {cid for log in logs for cid in log.content_ids or []}
        events = await self.store.behaviors.get_by_users_and_contents(
            {log.user_id for log in logs}, recommended_ids, since=start, until=end
        )

        results: dict[str, dict[str, Any]] = {}
        for algorithm, algorithm_logs in logs_by_algorithm.items():
            user_ids = {log.user_id for log in algorithm_logs}
            counts: dict[str, int] = defaultdict(int)
            for event in events:
                if event.user_id in user_ids:
                    counts[str(getattr(event.action, "value", event.action))] += 1

            impressions = sum(len(log.content_ids or []) for log in algorithm_logs)
            views = counts[InteractionAction.VIEW.value]
            likes = counts[InteractionAction.LIKE.value]
            saves = counts[InteractionAction.SAVE.value]
            shares = counts[InteractionAction.SHARE.value]
            results[algorithm] = {
                "users": len(user_ids),
                "impressions": impressions,
                "views": views,
                "likes": likes,
                "saves": saves,
                "shares": shares,
                "ctr": views / impressions if impressions else 0.0,
                "engagement_rate": (
                    (likes + saves + shares) / views if views else 0.0
                ),
            }

        return {
            "test": ab_test,
            "results": results,
            "start_date": start,
            "end_date": end,
            "is_active": ab_test.is_active,
        }
