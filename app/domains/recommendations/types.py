"""추천 엔진 내부 타입 정의"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, TypedDict

from app.domains.contents.models import ContentItem, ContentType, TimeOfDay
from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning


class RecommendationAlgorithm(str, Enum):
    """추천 알고리즘 식별자 (로그에 그대로 기록됨)"""

    CONTENT_BASED = "content-based"
    COLLABORATIVE = "collaborative-filtering"
    HYBRID = "hybrid"
    POPULAR = "popular"
    SEASONAL = "seasonal"
    CUSTOM = "custom"

    @classmethod
    def parse(
        cls, value: Optional[str], default: "RecommendationAlgorithm"
    ) -> "RecommendationAlgorithm":
        """알 수 없는 알고리즘 이름은 기본값으로 취급"""
        if not value:
            return default
        try:
            return cls(value)
        except ValueError:
            return default


# 개인화 파이프라인에서 실행 가능한 알고리즘
RUNNABLE_ALGORITHMS = frozenset(
    {
        RecommendationAlgorithm.CONTENT_BASED,
        RecommendationAlgorithm.COLLABORATIVE,
        RecommendationAlgorithm.HYBRID,
    }
)


@dataclass(frozen=True)
class PersonalizedWeights:
    """사용자별 개인화 가중치 (요청마다 재계산, 저장하지 않음)

    Attributes:
        content_type_preferences: 콘텐츠 타입별 정규화 선호도
        tag_preferences: 태그별 정규화 선호도
        seasonal_weight: 계절 관련성 가중치
        recency_weight: 최신성 가중치
        diversity_weight: 다양성 가중치 (0 이하이면 다양성 필터 생략)
        popularity_weight: 인기도 가중치
        personalized_weight: 하이브리드 블렌딩 시 콘텐츠 기반 비중
        tag_importance_weight: 관심 태그 일치 가중치
        health_relevance_weight: 건강 관련성 가중치
        preferred_time_of_day: 선호 시간대 (없으면 None)
        avoid_tags: 회피 태그
        boost_tags: 부스트 태그
    """

    content_type_preferences: dict[str, float] = field(default_factory=dict)
    tag_preferences: dict[str, float] = field(default_factory=dict)
    seasonal_weight: float = 0.2
    recency_weight: float = 0.2
    diversity_weight: float = 0.3
    popularity_weight: float = 0.1
    personalized_weight: float = 0.4
    tag_importance_weight: float = 0.4
    health_relevance_weight: float = 0.3
    preferred_time_of_day: Optional[TimeOfDay] = None
    avoid_tags: frozenset[str] = frozenset()
    boost_tags: frozenset[str] = frozenset()

    @classmethod
    def defaults(
        cls, tuning: RecommendationTuning = DEFAULT_TUNING
    ) -> "PersonalizedWeights":
        """튜닝 테이블의 기본 가중치로 생성"""
        d = tuning.defaults
        return cls(
            seasonal_weight=d.seasonal,
            recency_weight=d.recency,
            diversity_weight=d.diversity,
            popularity_weight=d.popularity,
            personalized_weight=d.personalized,
            tag_importance_weight=d.tag_importance,
            health_relevance_weight=d.health_relevance,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "content_type_preferences": dict(self.content_type_preferences),
            "tag_preferences": dict(self.tag_preferences),
            "seasonal_weight": self.seasonal_weight,
            "recency_weight": self.recency_weight,
            "diversity_weight": self.diversity_weight,
            "popularity_weight": self.popularity_weight,
            "personalized_weight": self.personalized_weight,
            "tag_importance_weight": self.tag_importance_weight,
            "health_relevance_weight": self.health_relevance_weight,
            "preferred_time_of_day": (
                self.preferred_time_of_day.value
                if self.preferred_time_of_day
                else None
            ),
            "avoid_tags": sorted(self.avoid_tags),
            "boost_tags": sorted(self.boost_tags),
        }


class PromotionProvenance(TypedDict, total=False):
    """점수 조정을 일으킨 프로모션 정보

    Attributes:
        id: 프로모션 ID
        name: 프로모션 이름
        boost: 적용 배율
        matched_tags: 태그 부스트로 일치한 태그
        matched_type: 타입 부스트로 일치한 콘텐츠 타입
    """

    id: int
    name: str
    boost: float
    matched_tags: list[str]
    matched_type: str


@dataclass
class ScoredContent:
    """점수가 매겨진 추천 후보

    Attributes:
        content: 콘텐츠
        score: 관련성 점수
        algorithm: 점수를 만든 알고리즘
        promotion: 시즌 부스트 출처 정보
        seasonal_suggestion: 프로모션 없이 TCM 절기 태그로 제안된 항목 여부
        season_tags: 일치한 절기 태그
    """

    content: ContentItem
    score: float
    algorithm: RecommendationAlgorithm
    promotion: Optional[PromotionProvenance] = None
    seasonal_suggestion: bool = False
    season_tags: list[str] = field(default_factory=list)

    @property
    def content_id(self) -> int:
        return self.content.id

    def with_score(self, score: float, **changes: Any) -> "ScoredContent":
        return replace(self, score=score, **changes)


@dataclass(frozen=True)
class SimilarUser:
    """유사 사용자

    Attributes:
        user_id: 사용자 ID
        similarity: 자카드 유사도
        common_interactions: 공통 상호작용 콘텐츠 수
    """

    user_id: int
    similarity: float
    common_interactions: int


@dataclass(frozen=True)
class RecommendationOptions:
    """개인화 추천 요청 옵션

    Attributes:
        content_type: 콘텐츠 타입 필터 (None이면 전체)
        limit: 최대 추천 수
        include_viewed: 이미 본 콘텐츠 포함 여부
        tags: 후보를 제한할 태그 (하나 이상 일치)
        ab_test_id: A/B 테스트 ID
        apply_seasonal_boosts: 시즌 부스트 적용 여부
    """

    content_type: Optional[ContentType] = None
    limit: int = 20
    include_viewed: bool = False
    tags: tuple[str, ...] = ()
    ab_test_id: Optional[int] = None
    apply_seasonal_boosts: bool = True


@dataclass(frozen=True)
class AlgorithmChoice:
    """알고리즘 선택 결과 (A/B 배정 정보 포함)"""

    algorithm: RecommendationAlgorithm
    ab_test_id: Optional[int] = None
    ab_test_variant: Optional[str] = None
