"""콘텐츠 기반 점수 계산

후보 콘텐츠마다 다음 하위 점수를 계산하고 개인화 가중치로 합산합니다.

- seasonal: 현재 계절 태그 일치 1.0, 반대 계절 0.2, 그 외 0.6
- recency: exp(-경과일/30)
- health: 사용자 체질/질환/목표와 콘텐츠 태그 일치 비율
- interest: 사용자 관심 태그 일치 비율
- 가산 보너스: 부스트 태그 +0.2, 선호 시간대 적합도 (최대 +0.2)
"""

import math
from datetime import datetime
from typing import Iterable, Optional, Sequence

from app.core.utils.datetime import ensure_utc, now_utc
from app.domains.behaviors.models import InteractionAction, InteractionEvent
from app.domains.contents.models import ContentItem, TimeOfDay
from app.domains.contents.repository import ContentFilters, ContentOrder
from app.domains.recommendations.seasonal.calendar import (
    OPPOSITE_SEASON,
    SEASON_TAGS,
    Season,
    current_season,
)
from app.domains.recommendations.store import RecommendationStore
from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning
from app.domains.recommendations.types import (
    PersonalizedWeights,
    RecommendationAlgorithm,
    RecommendationOptions,
    ScoredContent,
)
from app.domains.users.models import UserProfile


def _lowered(tags: Optional[Iterable[str]]) -> set[str]:
    return {tag.lower() for tag in tags or []}


def seasonal_relevance(tags: Optional[Sequence[str]], season: Season) -> float:
    """계절 관련성 점수"""
    if not tags:
        return 0.5

    content_tags = _lowered(tags)
    if content_tags & SEASON_TAGS[season]:
        return 1.0
    if content_tags & SEASON_TAGS[OPPOSITE_SEASON[season]]:
        return 0.2
    return 0.6


def recency_score(
    published_at: Optional[datetime],
    now: datetime,
    decay_days: float = 30.0,
) -> float:
    """게시일 기준 지수 감쇠 점수 (게시일이 없으면 0.5)"""
    if published_at is None:
        return 0.5
    age = now - ensure_utc(published_at)
    age_days = max(age.total_seconds(), 0.0) / 86400
    return math.exp(-age_days / decay_days)


def health_relevance(
    tags: Optional[Sequence[str]], profile: Optional[UserProfile]
) -> float:
    """건강 프로필(체질, 질환, 목표)과 콘텐츠 태그의 일치 점수

    Args:
        tags: 콘텐츠 태그
        profile: 사용자 프로필 (없으면 0.5)

    Returns:
        일치 없음 0.4, 일치 시 0.5~1.0
    """
    if profile is None:
        return 0.5

    terms = [term.lower() for term in profile.health_terms]
    if not terms:
        return 0.4

    content_tags = _lowered(tags)
    matches = sum(1 for term in terms if term in content_tags)
    if matches == 0:
        return 0.4
    return max(0.5, min(1.0, 0.5 + (matches / len(terms)) * 0.5))


def interest_score(
    tags: Optional[Sequence[str]],
    interest_tags: Sequence[str],
    denominator_cap: int = 5,
) -> float:
    """관심 태그 일치 점수

    Args:
        tags: 콘텐츠 태그
        interest_tags: 사용자 관심 태그 (없으면 0.5)
        denominator_cap: 일치 비율 분모 상한

    Returns:
        일치 없음 0.3, 일치 시 0.5~1.0
    """
    if not interest_tags:
        return 0.5

    content_tags = _lowered(tags)
    matches = sum(1 for tag in interest_tags if tag.lower() in content_tags)
    if matches == 0:
        return 0.3
    ratio = matches / min(len(interest_tags), denominator_cap)
    return max(0.5, min(1.0, ratio * 0.9))


def time_of_day_bonus(
    content: ContentItem, slot: Optional[TimeOfDay], cap: float = 0.2
) -> float:
    """선호 시간대 적합도 보너스 (상한 cap)"""
    if slot is None or not content.time_of_day_relevance:
        return 0.0
    relevance = content.time_of_day_relevance.get(slot.value) or 0.0
    return min(max(float(relevance), 0.0), cap)


class ContentBasedScorer:
    """콘텐츠 기반 추천 점수 계산기"""

    def __init__(self, tuning: RecommendationTuning = DEFAULT_TUNING):
        self.tuning = tuning

    def score_item(
        self,
        content: ContentItem,
        profile: Optional[UserProfile],
        interest_tags: Sequence[str],
        weights: PersonalizedWeights,
        season: Season,
        now: datetime,
    ) -> float:
        t = self.tuning
        score = (
            weights.seasonal_weight * seasonal_relevance(content.tags, season)
            + weights.recency_weight
            * recency_score(content.published_at, now, t.recency_decay_days)
            + weights.health_relevance_weight
            * health_relevance(content.tags, profile)
            + weights.tag_importance_weight
            * interest_score(
                content.tags, interest_tags, t.interest_match_denominator_cap
            )
        )

        if weights.boost_tags and set(content.tags or []) & weights.boost_tags:
            score += t.tag_boost_bonus

        score += time_of_day_bonus(
            content, weights.preferred_time_of_day, t.max_time_of_day_bonus
        )
        return score

    def score(
        self,
        candidates: Sequence[ContentItem],
        profile: Optional[UserProfile],
        interest_tags: Sequence[str],
        weights: PersonalizedWeights,
        now: Optional[datetime] = None,
    ) -> list[ScoredContent]:
        """후보 콘텐츠 점수 계산 후 내림차순 정렬

        Args:
            candidates: 후보 콘텐츠
            profile: 사용자 프로필
            interest_tags: 사용자 관심 태그
            weights: 개인화 가중치
            now: 기준 시각 (기본값: 현재)

        Returns:
            점수 내림차순 목록
        """
        now = now or now_utc()
        season = current_season(now)

        scored = [
            ScoredContent(
                content=item,
                score=self.score_item(
                    item, profile, interest_tags, weights, season, now
                ),
                algorithm=RecommendationAlgorithm.CONTENT_BASED,
            )
            for item in candidates
        ]
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored

    async def recommend(
        self,
        store: RecommendationStore,
        user_id: int,
        profile: Optional[UserProfile],
        behaviors: Sequence[InteractionEvent],
        options: RecommendationOptions,
        weights: PersonalizedWeights,
        now: Optional[datetime] = None,
    ) -> list[ScoredContent]:
        """콘텐츠 기반 추천

        요청 태그가 있으면 해당 태그로, 없으면 관심 태그로 후보를 제한하고
        회피 태그와 (요청 시) 이미 본 콘텐츠를 제외합니다.
        """
        now = now or now_utc()
        interests = await store.interests.get_by_user(
            user_id, limit=self.tuning.interest_tag_limit
        )
        interest_tags = [interest.tag for interest in interests]

        exclude_ids: Optional[list[int]] = None
        if not options.include_viewed:
            exclude_ids = sorted(
                {
                    b.content_id
                    for b in behaviors
                    if b.action == InteractionAction.VIEW
                }
            ) or None

        filters = ContentFilters(
            content_type=options.content_type,
            any_tags=list(options.tags) or interest_tags or None,
            exclude_tags=sorted(weights.avoid_tags) or None,
            exclude_ids=exclude_ids,
            active_only=True,
            published_before=now,
        )
        candidates = await store.contents.find(
            filters,
            order=ContentOrder.RECENT,
            limit=options.limit * self.tuning.candidate_oversampling,
        )

        scored = self.score(candidates, profile, interest_tags, weights, now)
        return scored[: options.limit]
