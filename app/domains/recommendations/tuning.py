"""추천 엔진 튜닝 파라미터

행동 가중치, 콘텐츠 타입별 가중치, 임계값 등 추천 품질에 영향을 주는
상수 테이블을 하나의 불변 설정 객체로 묶습니다. 각 컴포넌트는
생성자에서 `tuning`을 주입받으며 기본값은 DEFAULT_TUNING 입니다.

Example::

    tuning = DEFAULT_TUNING.model_copy(
        update={"min_interactions_for_adjustment": 5}
    )
    learner = FeedbackWeightLearner(tuning=tuning)
"""

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(mapping)


class ContentTypeWeights(BaseModel):
    """콘텐츠 타입별 체류 시간/완료율 가중치"""

    model_config = ConfigDict(frozen=True)

    duration: float = 0.5
    completion_rate: float = 0.5


class DefaultWeights(BaseModel):
    """개인화 이력이 부족할 때 사용하는 기본 가중치"""

    model_config = ConfigDict(frozen=True)

    seasonal: float = 0.2
    recency: float = 0.2
    diversity: float = 0.3
    popularity: float = 0.1
    personalized: float = 0.4
    tag_importance: float = 0.4
    health_relevance: float = 0.3


class RecommendationTuning(BaseModel):
    """추천 엔진 튜닝 테이블 (불변)"""

    model_config = ConfigDict(frozen=True)

    # 행동 → 부호 있는 가중치 (가중치 학습, 알고리즘 성과 분석)
    action_weights: Mapping[str, float] = Field(
        default_factory=lambda: _frozen(
            {
                "like": 1.5,
                "save": 2.0,
                "share": 2.0,
                "view": 0.5,
                "complete": 1.2,
                "click": 0.7,
                "comment": 1.3,
                "dislike": -1.5,
            }
        )
    )
    content_type_weights: Mapping[str, ContentTypeWeights] = Field(
        default_factory=lambda: _frozen(
            {
                "article": ContentTypeWeights(duration=0.1, completion_rate=0.9),
                "recipe": ContentTypeWeights(duration=0.2, completion_rate=0.8),
                "video": ContentTypeWeights(duration=0.7, completion_rate=0.3),
                "podcast": ContentTypeWeights(duration=0.6, completion_rate=0.4),
            }
        )
    )
    default_content_type_weights: ContentTypeWeights = ContentTypeWeights()

    # 협업 필터링 투표 가중치 (like < save <= share)
    collaborative_vote_weights: Mapping[str, float] = Field(
        default_factory=lambda: _frozen({"like": 1.0, "save": 1.5, "share": 2.0})
    )

    defaults: DefaultWeights = DefaultWeights()

    # 가중치 학습
    min_interactions_for_adjustment: int = 20
    learning_history_limit: int = 500
    preferred_time_slot_share: float = 0.3
    tag_spread_threshold: float = 0.5
    high_tag_importance: float = 0.6
    tag_feedback_share: float = 0.2
    seasonal_variance_factor: float = 0.3
    health_engagement_factor: float = 0.4
    max_health_relevance: float = 0.7
    high_diversity_ratio: float = 0.7
    low_diversity_ratio: float = 0.3
    high_diversity_weight: float = 0.5
    low_diversity_weight: float = 0.1
    health_tags: frozenset[str] = frozenset(
        {
            "health",
            "wellness",
            "tcm",
            "traditional",
            "medicine",
            "healing",
            "remedy",
        }
    )

    # 콘텐츠 기반 점수
    candidate_oversampling: int = 3
    recency_decay_days: float = 30.0
    tag_boost_bonus: float = 0.2
    max_time_of_day_bonus: float = 0.2
    interest_tag_limit: int = 20
    interest_match_denominator_cap: int = 5

    # 협업 필터링
    similarity_history_limit: int = 100
    min_events_for_similarity: int = 5
    min_overlap: int = 3
    min_similarity: float = 0.1
    max_neighbors: int = 50
    neighbor_event_limit: int = 500

    # 블렌딩 / 다양성
    co_occurrence_bonus: float = 1.2
    max_items_per_tag_group: int = 3

    # 오케스트레이터
    behavior_fetch_limit: int = 200
    performance_log_limit: int = 100
    default_algorithm: str = "hybrid"

    def action_weight(self, action: str) -> float:
        """행동 가중치 (알 수 없는 행동은 0)"""
        return self.action_weights.get(action, 0.0)

    def type_weights(self, content_type: str) -> ContentTypeWeights:
        """콘텐츠 타입별 가중치 (알 수 없는 타입은 기본값)"""
        return self.content_type_weights.get(
            content_type, self.default_content_type_weights
        )


DEFAULT_TUNING = RecommendationTuning()
