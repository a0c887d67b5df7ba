"""Recommendations 도메인 스키마 정의"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domains.behaviors.models import InteractionAction
from app.domains.contents.schemas import ContentResponse
from app.domains.recommendations.types import ScoredContent

# Request Schemas


class InteractionCreate(BaseModel):
    """사용자 행동 기록 요청"""

    content_id: int = Field(..., description="콘텐츠 ID")
    action: InteractionAction = Field(..., description="행동 종류")
    duration: Optional[float] = Field(
        None, ge=0, description="체류 시간 (초)"
    )
    completion_rate: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="완료율 (0~1)"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="추가 메타데이터"
    )


class ABTestVariant(BaseModel):
    """A/B 테스트 변형"""

    name: str = Field(..., min_length=1, max_length=100)
    algorithm: str = Field(..., description="추천 알고리즘")


class ABTestCreate(BaseModel):
    """A/B 테스트 생성 요청"""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    variants: list[ABTestVariant] = Field(..., description="변형 목록")
    start_date: Optional[datetime] = Field(
        None, description="시작 일시 (기본값: 현재)"
    )
    end_date: Optional[datetime] = Field(
        None, description="종료 일시 (기본값: 시작 + 30일)"
    )
    target_user_percentage: int = Field(
        100, ge=1, le=100, description="대상 사용자 비율"
    )


# Response Schemas


class PromotionInfo(BaseModel):
    """점수 조정을 일으킨 프로모션 정보"""

    id: int
    name: str
    boost: float
    matched_tags: Optional[list[str]] = None
    matched_type: Optional[str] = None


class RecommendationItem(BaseModel):
    """추천 항목"""

    content: ContentResponse
    score: float = Field(..., description="관련성 점수")
    algorithm: str = Field(..., description="점수를 만든 알고리즘")
    promotion: Optional[PromotionInfo] = None
    seasonal_suggestion: bool = False
    season_tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_scored(cls, scored: ScoredContent) -> "RecommendationItem":
        return cls(
            content=ContentResponse.model_validate(scored.content),
            score=scored.score,
            algorithm=scored.algorithm.value,
            promotion=(
                PromotionInfo(**scored.promotion) if scored.promotion else None
            ),
            seasonal_suggestion=scored.seasonal_suggestion,
            season_tags=list(scored.season_tags),
        )


class InteractionResponse(BaseModel):
    """행동 기록 결과"""

    tracked: bool


class UserInterestResponse(BaseModel):
    """사용자 관심 태그"""

    model_config = ConfigDict(from_attributes=True)

    tag: str
    interaction_count: int
    last_interaction: Optional[datetime] = None


class PersonalizedWeightsResponse(BaseModel):
    """개인화 가중치 (행동 기록이 부족하면 personalized=False)"""

    personalized: bool
    weights: Optional[dict[str, Any]] = None


class TCMSeasonResponse(BaseModel):
    """TCM 절기 정보"""

    key: str
    name: str
    months: list[int]
    element: str
    organ: str
    taste: str
    emotion: str
    color: str
    recommended_tags: list[str]
    avoid_tags: list[str]
    seasonal_foods: list[str]
    guidance: str


class ABTestResponse(BaseModel):
    """A/B 테스트 응답"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    variants: list[ABTestVariant]
    target_user_percentage: int
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool
    created_at: datetime


class AlgorithmResult(BaseModel):
    """알고리즘별 A/B 테스트 결과"""

    users: int
    impressions: int
    views: int
    likes: int
    saves: int
    shares: int
    ctr: float
    engagement_rate: float


class ABTestResultsResponse(BaseModel):
    """A/B 테스트 결과"""

    test: ABTestResponse
    results: dict[str, AlgorithmResult]
    start_date: datetime
    end_date: datetime
    is_active: bool

