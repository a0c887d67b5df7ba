"""Recommendations 도메인 라우터

개인화 추천, 행동 기록, 시즌 하이라이트, A/B 테스트 관리 API입니다.

content_type, algorithm 등 알 수 없는 값은 거부하지 않고 기본값
(전체 / hybrid)으로 처리합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import (
    APIResponse,
    ListAPIResponse,
    create_list_response,
    create_response,
)
from app.core.utils.pagination import PageParams
from app.domains.contents.models import ContentType
from app.domains.promotions.schemas import PromotionResponse
from app.domains.recommendations.ab_testing import ABTestService
from app.domains.recommendations.schemas import (
    ABTestCreate,
    ABTestResponse,
    ABTestResultsResponse,
    AlgorithmResult,
    InteractionCreate,
    InteractionResponse,
    PersonalizedWeightsResponse,
    RecommendationItem,
    TCMSeasonResponse,
    UserInterestResponse,
)
from app.domains.recommendations.service import (
    RecommendationEngine,
    get_recommendation_engine,
)
from app.domains.recommendations.types import RecommendationOptions

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])

LimitQuery = Query(
    settings.recommendation_default_limit,
    ge=1,
    le=settings.recommendation_max_limit,
    description="최대 추천 수",
)


def get_ab_test_service(
    session: AsyncSession = Depends(get_db),
) -> ABTestService:
    """ABTestService 의존성"""
    return ABTestService(session)


@router.get(
    "/users/{user_id}", response_model=APIResponse[list[RecommendationItem]]
)
async def get_personalized_recommendations(
    user_id: int,
    content_type: Optional[str] = Query(
        None, description="콘텐츠 타입 (알 수 없는 값은 전체)"
    ),
    limit: int = LimitQuery,
    include_viewed: bool = False,
    tags: Optional[list[str]] = Query(None, description="후보 제한 태그"),
    ab_test_id: Optional[int] = None,
    apply_seasonal_boosts: bool = True,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """개인화 추천 조회

    처리 중 오류가 발생해도 인기순 대체 추천을 반환합니다.
    """
    options = RecommendationOptions(
        content_type=ContentType.parse(content_type),
        limit=limit,
        include_viewed=include_viewed,
        tags=tuple(tags or ()),
        ab_test_id=ab_test_id,
        apply_seasonal_boosts=apply_seasonal_boosts,
    )
    items = await engine.get_personalized_recommendations(user_id, options)
    return create_response(
        data=[RecommendationItem.from_scored(item) for item in items],
        message="추천 목록을 조회했습니다.",
    )


@router.post(
    "/users/{user_id}/interactions",
    response_model=APIResponse[InteractionResponse],
    status_code=202,
)
async def track_interaction(
    user_id: int,
    data: InteractionCreate,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """사용자 행동 기록"""
    tracked = await engine.track_interaction(
        user_id,
        data.content_id,
        data.action,
        duration=data.duration,
        completion_rate=data.completion_rate,
        metadata=data.metadata,
    )
    return create_response(
        data=InteractionResponse(tracked=tracked),
        message=(
            "행동이 기록되었습니다." if tracked else "행동 기록에 실패했습니다."
        ),
    )


@router.get(
    "/fallback", response_model=APIResponse[list[RecommendationItem]]
)
async def get_fallback_recommendations(
    content_type: Optional[str] = None,
    limit: int = LimitQuery,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """인기순 대체 추천"""
    items = await engine.get_fallback_recommendations(
        ContentType.parse(content_type), limit
    )
    return create_response(
        data=[RecommendationItem.from_scored(item) for item in items],
        message="대체 추천 목록을 조회했습니다.",
    )


@router.get(
    "/trending", response_model=APIResponse[list[RecommendationItem]]
)
async def get_trending_recommendations(
    content_type: Optional[str] = None,
    limit: int = LimitQuery,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """인기 콘텐츠 조회"""
    items = await engine.get_trending_recommendations(
        ContentType.parse(content_type), limit
    )
    return create_response(
        data=[RecommendationItem.from_scored(item) for item in items],
        message="인기 콘텐츠를 조회했습니다.",
    )


@router.get(
    "/users/{user_id}/interests",
    response_model=APIResponse[list[UserInterestResponse]],
)
async def get_user_interests(
    user_id: int,
    limit: int = Query(20, ge=1, le=100),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """사용자 관심 태그 조회"""
    interests = await engine.get_user_interests(user_id, limit=limit)
    return create_response(
        data=[UserInterestResponse.model_validate(i) for i in interests],
        message="관심 태그를 조회했습니다.",
    )


@router.get(
    "/users/{user_id}/weights",
    response_model=APIResponse[PersonalizedWeightsResponse],
)
async def get_personalized_weights(
    user_id: int,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """개인화 가중치 조회 (행동 기록이 부족하면 weights=null)"""
    weights = await engine.get_personalized_weights(user_id)
    return create_response(
        data=PersonalizedWeightsResponse(
            personalized=weights is not None,
            weights=weights.to_dict() if weights else None,
        ),
        message="개인화 가중치를 조회했습니다.",
    )


@router.get(
    "/users/{user_id}/seasonal",
    response_model=APIResponse[list[RecommendationItem]],
)
async def get_seasonal_highlights(
    user_id: int,
    limit: int = Query(10, ge=1, le=50),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """시즌 하이라이트 조회"""
    items = await engine.get_seasonal_highlights(user_id, limit=limit)
    return create_response(
        data=[RecommendationItem.from_scored(item) for item in items],
        message="시즌 하이라이트를 조회했습니다.",
    )


@router.get("/seasonal/info", response_model=APIResponse[TCMSeasonResponse])
async def get_seasonal_info(
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """현재 TCM 절기 정보 조회"""
    season = engine.get_seasonal_info()
    return create_response(
        data=TCMSeasonResponse(**season.to_dict()),
        message="절기 정보를 조회했습니다.",
    )


@router.post(
    "/seasonal/auto-promotion",
    response_model=APIResponse[Optional[PromotionResponse]],
)
async def create_automatic_promotion(
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """현재 절기 자동 프로모션 생성 (이미 진행 중이면 data=null)"""
    promotion = await engine.create_automatic_promotion()
    if promotion is None:
        return create_response(
            data=None, message="진행 중인 자동 프로모션이 있습니다."
        )
    return create_response(
        data=PromotionResponse.model_validate(promotion),
        message="자동 프로모션이 생성되었습니다.",
    )


@router.post(
    "/ab-tests",
    response_model=APIResponse[ABTestResponse],
    status_code=201,
)
async def create_ab_test(
    data: ABTestCreate,
    service: ABTestService = Depends(get_ab_test_service),
):
    """A/B 테스트 생성"""
    ab_test = await service.create_ab_test(data)
    return create_response(
        data=ABTestResponse.model_validate(ab_test),
        message="A/B 테스트가 생성되었습니다.",
    )


@router.get("/ab-tests", response_model=ListAPIResponse[ABTestResponse])
async def get_ab_tests(
    page_params: PageParams = Depends(),
    active_only: bool = False,
    service: ABTestService = Depends(get_ab_test_service),
):
    """A/B 테스트 목록 조회"""
    tests, total = await service.get_ab_tests(
        page=page_params.page,
        size=page_params.size,
        active_only=active_only,
    )
    return create_list_response(
        data=[ABTestResponse.model_validate(t) for t in tests],
        total=total,
        page=page_params.page,
        size=page_params.size,
        message="A/B 테스트 목록을 조회했습니다.",
    )


@router.get(
    "/ab-tests/{ab_test_id}/results",
    response_model=APIResponse[ABTestResultsResponse],
)
async def get_ab_test_results(
    ab_test_id: int,
    service: ABTestService = Depends(get_ab_test_service),
):
    """A/B 테스트 결과 조회"""
    results = await service.get_ab_test_results(ab_test_id)
    return create_response(
        data=ABTestResultsResponse(
            test=ABTestResponse.model_validate(results["test"]),
            results={
                name: AlgorithmResult(**metrics)
                for name, metrics in results["results"].items()
            },
            start_date=results["start_date"],
            end_date=results["end_date"],
            is_active=results["is_active"],
        ),
        message="A/B 테스트 결과를 조회했습니다.",
    )


@router.delete(
    "/ab-tests/{ab_test_id}", response_model=APIResponse[ABTestResponse]
)
async def deactivate_ab_test(
    ab_test_id: int,
    service: ABTestService = Depends(get_ab_test_service),
):
    """A/B 테스트 비활성화"""
    ab_test = await service.deactivate_ab_test(ab_test_id)
    return create_response(
        data=ABTestResponse.model_validate(ab_test),
        message="A/B 테스트가 비활성화되었습니다.",
    )
