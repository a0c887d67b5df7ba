"""추천 엔진 오케스트레이터

요청마다 다음 순서로 개인화 추천을 만듭니다.

    알고리즘 선택 → 점수 계산 → 블렌딩 → 다양성 필터 → 시즌 부스트 → 로그

프로필/행동/가중치 조회는 병렬로 수행하며, 조회 실패나 타임아웃은
각 기본값으로 대체됩니다. 알고리즘 선택이 실패하면 hybrid를, 시즌 부스트가
실패하면 부스트 전 목록을 사용합니다. 점수 계산 분기의 타임아웃은 예외로
취급하며, 파이프라인 어디에서든 예외가 발생하면 인기순 대체 추천을
반환하고 호출자에게 예외를 전파하지 않습니다.
"""

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Any, Awaitable, Optional, Sequence, TypeVar

from app.core.config import settings
from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.core.utils.datetime import now_utc
from app.domains.behaviors.models import (
    POSITIVE_INTEREST_ACTIONS,
    InteractionAction,
    InteractionEvent,
    UserInterestScore,
)
from app.domains.contents.models import ContentType
from app.domains.contents.repository import ContentFilters, ContentOrder
from app.domains.promotions.models import SeasonalPromotion
from app.domains.recommendations.ab_testing import resolve_ab_test_choice
from app.domains.recommendations.background import (
    spawn,
    wait_for_pending_tasks,
)
from app.domains.recommendations.feedback.learner import FeedbackWeightLearner
from app.domains.recommendations.feedback.performance import (
    AlgorithmPerformanceAnalyzer,
)
from app.domains.recommendations.models import RecommendationLog
from app.domains.recommendations.ranking.blender import blend
from app.domains.recommendations.ranking.diversity import ensure_diversity
from app.domains.recommendations.scoring.collaborative import (
    CollaborativeScorer,
)
from app.domains.recommendations.scoring.content import ContentBasedScorer
from app.domains.recommendations.scoring.similarity import SimilarityIndex
from app.domains.recommendations.seasonal.calendar import (
    TCMSeason,
    get_tcm_seasonal_info,
)
from app.domains.recommendations.seasonal.service import SeasonalBoostService
from app.domains.recommendations.store import StoreFactory, open_store
from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning
from app.domains.recommendations.types import (
    RUNNABLE_ALGORITHMS,
    AlgorithmChoice,
    PersonalizedWeights,
    RecommendationAlgorithm,
    RecommendationOptions,
    ScoredContent,
)
from app.domains.users.models import UserProfile

logger = get_logger(__name__)

T = TypeVar("T")


class RecommendationEngine:
    """개인화 추천 엔진

    모든 조회는 `store_factory`로 연 저장소에서 수행합니다. 병렬 분기는
    각자의 저장소(세션)를 사용하므로 세션을 공유하지 않습니다.
    """

    def __init__(
        self,
        store_factory: StoreFactory = open_store,
        tuning: RecommendationTuning = DEFAULT_TUNING,
        fetch_timeout: Optional[float] = None,
        similarity_index: Optional[SimilarityIndex] = None,
    ):
        """
        Args:
            store_factory: 저장소 팩토리
            tuning: 튜닝 파라미터
            fetch_timeout: 조회 및 점수 계산 단계별 타임아웃 (초)
            similarity_index: 유사 사용자 인덱스 (기본: 행동 기록 기반)
        """
        self.store_factory = store_factory
        self.tuning = tuning
        self.fetch_timeout = (
            fetch_timeout or settings.recommendation_fetch_timeout_seconds
        )
        self.learner = FeedbackWeightLearner(tuning)
        self.performance = AlgorithmPerformanceAnalyzer(tuning)
        self.content_scorer = ContentBasedScorer(tuning)
        self.collaborative_scorer = CollaborativeScorer(similarity_index, tuning)
        self.seasonal = SeasonalBoostService(store_factory)

    async def get_personalized_recommendations(
        self,
        user_id: int,
        options: Optional[RecommendationOptions] = None,
        now: Optional[datetime] = None,
    ) -> list[ScoredContent]:
        """개인화 추천

        Args:
            user_id: 사용자 ID
            options: 추천 옵션
            now: 기준 시각 (기본: 현재 UTC)

        Returns:
            점수 내림차순 추천 목록. 프로필이 없거나 처리 중 오류가 나면
            인기순 대체 추천
        """
        options = options or RecommendationOptions()
        now = now or now_utc()

        try:
            return await self._recommend(user_id, options, now)
        except Exception as e:
            logger.error(
                f"Personalized recommendation failed, using fallback: {e}",
                extra={"request_id": get_request_id(), "user_id": user_id},
                exc_info=True,
            )
            return await self.get_fallback_recommendations(
                options.content_type, options.limit
            )

    async def _recommend(
        self, user_id: int, options: RecommendationOptions, now: datetime
    ) -> list[ScoredContent]:
        profile, behaviors, learned = await asyncio.gather(
            self._fetch("profile", self._load_profile(user_id), None),
            self._fetch("behaviors", self._load_behaviors(user_id), []),
            self._fetch("weights", self._load_weights(user_id), None),
        )

        if profile is None:
            logger.info(
                f"No profile for user {user_id}, using fallback",
                extra={"request_id": get_request_id(), "user_id": user_id},
            )
            return await self.get_fallback_recommendations(
                options.content_type, options.limit
            )

        weights = learned or PersonalizedWeights.defaults(self.tuning)
        choice = await self._fetch(
            "algorithm",
            self.select_algorithm(user_id, options.ab_test_id, now),
            AlgorithmChoice(algorithm=RecommendationAlgorithm.HYBRID),
        )

        produced_by, items = await self._run_algorithm(
            choice.algorithm, user_id, profile, behaviors, options, weights, now
        )
        # 실제로 목록을 만든 알고리즘으로 기록 (협업 필터링 cold start 등)
        choice = replace(choice, algorithm=produced_by)
        items = ensure_diversity(
            items, options.limit, weights.diversity_weight, self.tuning
        )

        if options.apply_seasonal_boosts and items:
            items = await self._fetch(
                "seasonal boosts",
                self._apply_seasonal_boosts(items, user_id, profile, now),
                items,
            )

        items = _unique_active(items)[: options.limit]

        logger.info(
            f"Recommendations generated for user {user_id}",
            extra={
                "request_id": get_request_id(),
                "user_id": user_id,
                "algorithm": choice.algorithm.value,
                "personalized": learned is not None,
                "count": len(items),
            },
        )

        if items:
            spawn(
                self._log_recommendations(user_id, items, choice),
                "recommendation log",
            )
        return items

    async def _fetch(self, name: str, fetch: Awaitable[T], default: T) -> T:
        """조회 분기 실행 (타임아웃/오류 시 기본값)"""
        try:
            return await asyncio.wait_for(fetch, timeout=self.fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Fetching {name} timed out after {self.fetch_timeout}s",
                extra={"request_id": get_request_id()},
            )
        except Exception as e:
            logger.warning(
                f"Fetching {name} failed: {e}",
                extra={"request_id": get_request_id()},
            )
        return default

    async def _apply_seasonal_boosts(
        self,
        items: list[ScoredContent],
        user_id: int,
        profile: UserProfile,
        now: datetime,
    ) -> list[ScoredContent]:
        async with self.store_factory() as store:
            return await self.seasonal.apply_seasonal_boosts(
                store, items, user_id, profile=profile, now=now
            )

    async def _load_profile(self, user_id: int) -> Optional[UserProfile]:
        async with self.store_factory() as store:
            return await store.profiles.get_by_user_id(user_id)

    async def _load_behaviors(self, user_id: int) -> list[InteractionEvent]:
        async with self.store_factory() as store:
            events = await store.behaviors.get_recent_by_user(
                user_id, limit=self.tuning.behavior_fetch_limit
            )
            return list(events)

    async def _load_weights(
        self, user_id: int
    ) -> Optional[PersonalizedWeights]:
        async with self.store_factory() as store:
            return await self.learner.generate(store, user_id)

    async def select_algorithm(
        self,
        user_id: int,
        ab_test_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AlgorithmChoice:
        """추천 알고리즘 선택

        A/B 테스트가 지정되고 사용자가 대상이면 배정된 변형의 알고리즘을,
        아니면 과거 성과가 가장 좋은 알고리즘을 사용합니다. 실행할 수 없는
        알고리즘(popular, seasonal 등)은 hybrid로 대체합니다.
        """
        choice: Optional[AlgorithmChoice] = None
        async with self.store_factory() as store:
            if ab_test_id is not None:
                try:
                    choice = await resolve_ab_test_choice(
                        store, ab_test_id, user_id, now=now
                    )
                except Exception as e:
                    logger.warning(
                        f"Failed to resolve A/B test {ab_test_id}: {e}",
                        extra={"user_id": user_id},
                    )
            if choice is None:
                algorithm = await self.performance.determine_best_algorithm(
                    store, user_id
                )
                choice = AlgorithmChoice(algorithm=algorithm)

        if choice.algorithm not in RUNNABLE_ALGORITHMS:
            choice = AlgorithmChoice(
                algorithm=RecommendationAlgorithm.HYBRID,
                ab_test_id=choice.ab_test_id,
                ab_test_variant=choice.ab_test_variant,
            )
        return choice

    async def _run_algorithm(
        self,
        algorithm: RecommendationAlgorithm,
        user_id: int,
        profile: UserProfile,
        behaviors: Sequence[InteractionEvent],
        options: RecommendationOptions,
        weights: PersonalizedWeights,
        now: datetime,
    ) -> tuple[RecommendationAlgorithm, list[ScoredContent]]:
        """알고리즘 실행

        Returns:
            (실제로 목록을 만든 알고리즘, 추천 목록)
        """
        if algorithm == RecommendationAlgorithm.CONTENT_BASED:
            return algorithm, await self._content_based(
                user_id, profile, behaviors, options, weights, now
            )

        if algorithm == RecommendationAlgorithm.COLLABORATIVE:
            items = await self._collaborative(user_id, options, now)
            if items:
                return algorithm, items
            # 유사 사용자가 없으면 콘텐츠 기반으로 대체
            items = await self._content_based(
                user_id, profile, behaviors, options, weights, now
            )
            return RecommendationAlgorithm.CONTENT_BASED, items

        return RecommendationAlgorithm.HYBRID, await self._hybrid(
            user_id, profile, behaviors, options, weights, now
        )

    async def _content_based(
        self,
        user_id: int,
        profile: Optional[UserProfile],
        behaviors: Sequence[InteractionEvent],
        options: RecommendationOptions,
        weights: PersonalizedWeights,
        now: datetime,
    ) -> list[ScoredContent]:
        """콘텐츠 기반 점수 계산 (타임아웃 시 asyncio.TimeoutError)"""

        async def run() -> list[ScoredContent]:
            async with self.store_factory() as store:
                return await self.content_scorer.recommend(
                    store, user_id, profile, behaviors, options, weights, now=now
                )

        return await asyncio.wait_for(run(), timeout=self.fetch_timeout)

    async def _collaborative(
        self, user_id: int, options: RecommendationOptions, now: datetime
    ) -> list[ScoredContent]:
        """협업 필터링 점수 계산 (타임아웃 시 asyncio.TimeoutError)"""

        async def run() -> list[ScoredContent]:
            async with self.store_factory() as store:
                return await self.collaborative_scorer.recommend(
                    store, user_id, options, now=now
                )

        return await asyncio.wait_for(run(), timeout=self.fetch_timeout)

    async def _hybrid(
        self,
        user_id: int,
        profile: UserProfile,
        behaviors: Sequence[InteractionEvent],
        options: RecommendationOptions,
        weights: PersonalizedWeights,
        now: datetime,
    ) -> list[ScoredContent]:
        """콘텐츠 기반(limit)과 협업 필터링(limit × 2)을 병렬 실행 후 블렌딩

        한쪽이 실패하면 다른 쪽 결과만 사용합니다.
        """
        collaborative_options = RecommendationOptions(
            content_type=options.content_type,
            limit=options.limit * 2,
            include_viewed=options.include_viewed,
            tags=options.tags,
        )
        content_based, collaborative = await asyncio.gather(
            self._content_based(
                user_id, profile, behaviors, options, weights, now
            ),
            self._collaborative(user_id, collaborative_options, now),
            return_exceptions=True,
        )

        if isinstance(content_based, BaseException) and isinstance(
            collaborative, BaseException
        ):
            raise content_based
        if isinstance(content_based, BaseException):
            logger.warning(
                f"Content-based scoring failed in hybrid: {content_based}",
                extra={"user_id": user_id},
            )
            content_based = []
        if isinstance(collaborative, BaseException):
            logger.warning(
                f"Collaborative scoring failed in hybrid: {collaborative}",
                extra={"user_id": user_id},
            )
            collaborative = []

        return blend(
            content_based,
            collaborative,
            limit=options.limit,
            content_weight=weights.personalized_weight,
            tuning=self.tuning,
        )

    async def _log_recommendations(
        self,
        user_id: int,
        items: Sequence[ScoredContent],
        choice: AlgorithmChoice,
    ) -> None:
        log = RecommendationLog(
            user_id=user_id,
            content_ids=[item.content_id for item in items],
            algorithm=choice.algorithm.value,
            scores=[item.score for item in items],
            ab_test_id=choice.ab_test_id,
            ab_test_variant=choice.ab_test_variant,
        )
        async with self.store_factory() as store:
            await store.logs.create(log)

    async def wait_for_pending_logs(self, timeout: float = 5.0) -> None:
        """기록 대기 중인 추천 로그 처리 (종료 시 호출)"""
        await wait_for_pending_tasks(timeout=timeout)

    async def get_fallback_recommendations(
        self,
        content_type: Optional[ContentType] = None,
        limit: int = 20,
    ) -> list[ScoredContent]:
        """인기순 대체 추천 (조회수 → 최신순)

        예외를 전파하지 않으며, 조회에 실패하면 빈 목록을 반환합니다.
        """
        try:
            return await self._popular(content_type, limit)
        except Exception as e:
            logger.error(
                f"Fallback recommendation failed: {e}",
                extra={"request_id": get_request_id()},
                exc_info=True,
            )
            return []

    async def get_trending_recommendations(
        self,
        content_type: Optional[ContentType] = None,
        limit: int = 20,
    ) -> list[ScoredContent]:
        """인기 콘텐츠 (대체 추천과 같은 정렬)"""
        return await self._popular(content_type, limit)

    async def _popular(
        self, content_type: Optional[ContentType], limit: int
    ) -> list[ScoredContent]:
        async with self.store_factory() as store:
            items = await store.contents.find(
                ContentFilters(
                    content_type=content_type,
                    active_only=True,
                    published_before=now_utc(),
                ),
                order=ContentOrder.POPULAR,
                limit=limit,
            )

        # 순위만 의미가 있으므로 점수는 1에서 순서대로 감소
        total = len(items)
        return [
            ScoredContent(
                content=item,
                score=(total - index) / total,
                algorithm=RecommendationAlgorithm.POPULAR,
            )
            for index, item in enumerate(items)
        ]

    async def track_interaction(
        self,
        user_id: int,
        content_id: int,
        action: InteractionAction,
        duration: Optional[float] = None,
        completion_rate: Optional[float] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> bool:
        """사용자 행동 기록

        행동 기록을 먼저 커밋한 뒤, view/like는 콘텐츠 카운터를,
        like/save/share는 콘텐츠 태그별 관심도를 별도 트랜잭션으로
        갱신합니다. 부가 갱신이 실패해도 행동 기록은 유지됩니다.

        Returns:
            행동 기록 성공 여부 (실패해도 예외를 전파하지 않음)
        """
        try:
            async with self.store_factory() as store:
                await store.behaviors.create(
                    InteractionEvent(
                        user_id=user_id,
                        content_id=content_id,
                        action=action,
                        duration=duration,
                        completion_rate=completion_rate,
                        event_metadata=metadata or {},
                        timestamp=now_utc(),
                    )
                )
        except Exception as e:
            logger.error(
                f"Failed to track interaction: {e}",
                extra={
                    "request_id": get_request_id(),
                    "user_id": user_id,
                    "content_id": content_id,
                    "action": action.value,
                },
                exc_info=True,
            )
            return False

        logger.info(
            f"Interaction tracked: user {user_id} {action.value} {content_id}",
            extra={"request_id": get_request_id()},
        )

        if action in (InteractionAction.VIEW, InteractionAction.LIKE):
            await self._update_engagement(
                "content counters",
                self._increment_counters(content_id, action),
                user_id,
                content_id,
            )
        if action in POSITIVE_INTEREST_ACTIONS:
            await self._update_engagement(
                "user interests",
                self._increment_interests(user_id, content_id),
                user_id,
                content_id,
            )
        return True

    async def _update_engagement(
        self, name: str, update: Awaitable[None], user_id: int, content_id: int
    ) -> None:
        """행동 기록 후속 갱신 (실패는 로깅만)"""
        try:
            await update
        except Exception as e:
            logger.warning(
                f"Failed to update {name} after interaction: {e}",
                extra={
                    "request_id": get_request_id(),
                    "user_id": user_id,
                    "content_id": content_id,
                },
                exc_info=True,
            )

    async def _increment_counters(
        self, content_id: int, action: InteractionAction
    ) -> None:
        async with self.store_factory() as store:
            if action == InteractionAction.VIEW:
                await store.contents.increment_view_count(content_id)
            else:
                await store.contents.increment_like_count(content_id)

    async def _increment_interests(self, user_id: int, content_id: int) -> None:
        async with self.store_factory() as store:
            content = await store.contents.get_by_id(content_id)
            for tag in (content.tags or []) if content else []:
                await store.interests.increment(user_id, tag)

    async def get_user_interests(
        self, user_id: int, limit: int = 20
    ) -> list[UserInterestScore]:
        """사용자 관심 태그 (상호작용 횟수 내림차순)"""
        async with self.store_factory() as store:
            return list(await store.interests.get_by_user(user_id, limit=limit))

    async def get_personalized_weights(
        self, user_id: int
    ) -> Optional[PersonalizedWeights]:
        """개인화 가중치 (행동 기록이 부족하면 None)"""
        return await self._load_weights(user_id)

    async def get_seasonal_highlights(
        self, user_id: int, limit: int = 10, now: Optional[datetime] = None
    ) -> list[ScoredContent]:
        """시즌 하이라이트"""
        async with self.store_factory() as store:
            return await self.seasonal.get_seasonal_highlights(
                store, user_id, limit=limit, now=now
            )

    def get_seasonal_info(self, now: Optional[datetime] = None) -> TCMSeason:
        """현재 TCM 절기 정보"""
        return get_tcm_seasonal_info(now or now_utc())

    async def create_automatic_promotion(
        self, now: Optional[datetime] = None
    ) -> Optional[SeasonalPromotion]:
        """현재 절기 자동 프로모션 생성 (이미 있으면 None)"""
        async with self.store_factory() as store:
            return await self.seasonal.create_automatic_seasonal_promotion(
                store, now=now
            )


def _unique_active(items: Sequence[ScoredContent]) -> list[ScoredContent]:
    """중복 및 비활성 콘텐츠 제거 (순서 유지)"""
    seen: set[int] = set()
    result = []
    for item in items:
        if item.content_id in seen or not item.content.is_active:
            continue
        seen.add(item.content_id)
        result.append(item)
    return result


def get_recommendation_engine() -> RecommendationEngine:
    """FastAPI 의존성: 추천 엔진"""
    return RecommendationEngine()

