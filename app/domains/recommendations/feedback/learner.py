"""피드백 기반 개인화 가중치 학습

사용자의 최근 행동 기록(최대 500건)에서 콘텐츠 타입/태그/계절 선호도와
시간대 패턴을 추출하여 하위 점수 계산기가 사용할 PersonalizedWeights를
만듭니다. 행동 기록이 20건 미만이면 개인화하지 않습니다(None).
"""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

import numpy as np

from app.core.logging import get_logger
from app.domains.behaviors.models import InteractionEvent
from app.domains.contents.models import ContentItem, TimeOfDay
from app.domains.recommendations.seasonal.calendar import season_of_tags
from app.domains.recommendations.store import RecommendationStore
from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning
from app.domains.recommendations.types import PersonalizedWeights

logger = get_logger(__name__)


def normalize(values: Mapping[str, float]) -> dict[str, float]:
    """절대값 합이 1.0이 되도록 정규화

    값이 0인 키는 제거하므로 결과는 비어 있거나 절대값 합이 1.0입니다.
    """
    nonzero = {key: value for key, value in values.items() if value != 0}
    total = sum(abs(v) for v in nonzero.values())
    if total <= 0:
        return {}
    return {key: value / total for key, value in nonzero.items()}


@dataclass
class EngagementPatterns:
    """행동 기록에서 추출한 참여 패턴 (모든 선호도는 정규화됨)"""

    content_type_preference: dict[str, float] = field(default_factory=dict)
    tag_preference: dict[str, float] = field(default_factory=dict)
    positive_feedback_tags: dict[str, float] = field(default_factory=dict)
    negative_feedback_tags: dict[str, float] = field(default_factory=dict)
    seasonal_preference: dict[str, float] = field(default_factory=dict)
    time_spent_preference: dict[str, float] = field(default_factory=dict)
    completion_preference: dict[str, float] = field(default_factory=dict)
    action_distribution: dict[str, float] = field(default_factory=dict)
    time_of_day_distribution: dict[TimeOfDay, float] = field(
        default_factory=dict
    )
    unique_content_count: int = 0
    total_events: int = 0


class FeedbackWeightLearner:
    """행동 기록 → 개인화 가중치 변환기"""

    def __init__(self, tuning: RecommendationTuning = DEFAULT_TUNING):
        self.tuning = tuning

    def analyze_engagement_patterns(
        self,
        events: Sequence[InteractionEvent],
        contents: Mapping[int, ContentItem],
    ) -> EngagementPatterns:
        """행동 기록별 가중치를 타입/태그/계절 단위로 누적하고 정규화

        참조 콘텐츠가 없는 행동은 건너뜁니다.

        Args:
            events: 행동 기록 (최신순)
            contents: 콘텐츠 ID → 콘텐츠

        Returns:
            정규화된 참여 패턴
        """
        type_pref: dict[str, float] = defaultdict(float)
        tag_pref: dict[str, float] = defaultdict(float)
        positive_tags: dict[str, float] = defaultdict(float)
        negative_tags: dict[str, float] = defaultdict(float)
        seasonal_pref: dict[str, float] = defaultdict(float)
        time_spent: dict[str, float] = defaultdict(float)
        completion: dict[str, float] = defaultdict(float)
        actions: Counter[str] = Counter()
        slots: Counter[TimeOfDay] = Counter()

        for event in events:
            content = contents.get(event.content_id)
            if content is None:
                continue

            action = str(getattr(event.action, "value", event.action))
            content_type = str(
                getattr(content.content_type, "value", content.content_type)
            )
            weight = self.tuning.action_weight(action)

            type_pref[content_type] += weight
            for tag in content.tags or []:
                tag_pref[tag] += weight
                if weight > 0:
                    positive_tags[tag] += weight
                elif weight < 0:
                    negative_tags[tag] += abs(weight)

            season = season_of_tags(content.tags or [])
            if season is not None:
                seasonal_pref[season.value] += weight

            type_weights = self.tuning.type_weights(content_type)
            if event.duration and event.duration > 0:
                time_spent[content_type] += (
                    event.duration * type_weights.duration
                )
            if event.completion_rate and event.completion_rate > 0:
                completion[content_type] += (
                    event.completion_rate * type_weights.completion_rate
                )

            actions[action] += 1
            if event.timestamp is not None:
                slots[TimeOfDay.from_hour(event.timestamp.hour)] += 1

        total_actions = sum(actions.values())
        total_slots = sum(slots.values())
        unique_ids = {e.content_id for e in events if e.content_id in contents}

        return EngagementPatterns(
            content_type_preference=normalize(type_pref),
            tag_preference=normalize(tag_pref),
            positive_feedback_tags=normalize(positive_tags),
            negative_feedback_tags=normalize(negative_tags),
            seasonal_preference=normalize(seasonal_pref),
            time_spent_preference=normalize(time_spent),
            completion_preference=normalize(completion),
            action_distribution=(
                {a: c / total_actions for a, c in actions.items()}
                if total_actions
                else {}
            ),
            time_of_day_distribution=(
                {s: c / total_slots for s, c in slots.items()}
                if total_slots
                else {}
            ),
            unique_content_count=len(unique_ids),
            total_events=len(events),
        )

    def calculate_weights(
        self, patterns: EngagementPatterns
    ) -> PersonalizedWeights:
        """참여 패턴으로부터 개인화 가중치 계산

        Args:
            patterns: 정규화된 참여 패턴

        Returns:
            개인화 가중치
        """
        t = self.tuning
        defaults = PersonalizedWeights.defaults(t)

        seasonal_weight = defaults.seasonal_weight
        if patterns.seasonal_preference:
            # 계절 선호 편차가 클수록 계절 점수를 더 신뢰 (0.2~0.5)
            variance = float(
                np.var(list(patterns.seasonal_preference.values()))
            )
            seasonal_weight = (
                defaults.seasonal_weight
                + variance * t.seasonal_variance_factor
            )

        preferred_slot: Optional[TimeOfDay] = None
        if patterns.time_of_day_distribution:
            slot, share = max(
                patterns.time_of_day_distribution.items(), key=lambda x: x[1]
            )
            if share > t.preferred_time_slot_share:
                preferred_slot = slot

        tag_importance = defaults.tag_importance_weight
        if patterns.tag_preference:
            values = patterns.tag_preference.values()
            if max(values) - min(values) > t.tag_spread_threshold:
                tag_importance = t.high_tag_importance

        avoid_tags = frozenset(
            tag
            for tag, share in patterns.negative_feedback_tags.items()
            if share > t.tag_feedback_share
        )
        boost_tags = frozenset(
            tag
            for tag, share in patterns.positive_feedback_tags.items()
            if share > t.tag_feedback_share
        )

        health_weight = defaults.health_relevance_weight
        health_shares = [
            share
            for tag, share in patterns.positive_feedback_tags.items()
            if tag.lower() in t.health_tags
        ]
        if health_shares:
            health_weight = min(
                defaults.health_relevance_weight
                + sum(health_shares) * t.health_engagement_factor,
                t.max_health_relevance,
            )

        diversity_weight = defaults.diversity_weight
        if patterns.total_events:
            ratio = patterns.unique_content_count / patterns.total_events
            if ratio > t.high_diversity_ratio:
                diversity_weight = t.high_diversity_weight
            elif ratio < t.low_diversity_ratio:
                diversity_weight = t.low_diversity_weight

        return PersonalizedWeights(
            content_type_preferences=dict(patterns.content_type_preference),
            tag_preferences=dict(patterns.tag_preference),
            seasonal_weight=seasonal_weight,
            recency_weight=defaults.recency_weight,
            diversity_weight=diversity_weight,
            popularity_weight=defaults.popularity_weight,
            personalized_weight=defaults.personalized_weight,
            tag_importance_weight=tag_importance,
            health_relevance_weight=health_weight,
            preferred_time_of_day=preferred_slot,
            avoid_tags=avoid_tags,
            boost_tags=boost_tags,
        )

    def build(
        self,
        events: Sequence[InteractionEvent],
        contents: Mapping[int, ContentItem],
    ) -> Optional[PersonalizedWeights]:
        """행동 기록이 충분하면 개인화 가중치 생성, 아니면 None"""
        if len(events) < self.tuning.min_interactions_for_adjustment:
            return None

        patterns = self.analyze_engagement_patterns(events, contents)
        return self.calculate_weights(patterns)

    async def generate(
        self, store: RecommendationStore, user_id: int
    ) -> Optional[PersonalizedWeights]:
        """사용자의 개인화 가중치 생성

        조회 실패 시 예외를 전파하지 않고 None(기본 가중치 사용)을 반환합니다.

        Args:
            store: 저장소
            user_id: 사용자 ID

        Returns:
            개인화 가중치 또는 None
        """
        try:
            events = await store.behaviors.get_recent_by_user(
                user_id, limit=self.tuning.learning_history_limit
            )
            if len(events) < self.tuning.min_interactions_for_adjustment:
                return None

            items = await store.contents.get_by_ids(
                list({e.content_id for e in events}), active_only=False
            )
            return self.build(events, {item.id: item for item in items})
        except Exception as e:
            logger.warning(
                f"Failed to generate personalized weights: {e}",
                extra={"user_id": user_id},
                exc_info=True,
            )
            return None
