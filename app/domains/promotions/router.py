"""Promotions 도메인 라우터

시즌 프로모션 관리 API 엔드포인트입니다.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import (
    APIResponse,
    ListAPIResponse,
    create_list_response,
    create_response,
)
from app.core.utils.pagination import PageParams
from app.domains.promotions.schemas import (
    PromotionCreate,
    PromotionResponse,
    PromotionUpdate,
)
from app.domains.promotions.service import PromotionService

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


def get_promotion_service(
    session: AsyncSession = Depends(get_db),
) -> PromotionService:
    """PromotionService 의존성"""
    return PromotionService(session)


@router.post(
    "",
    response_model=APIResponse[PromotionResponse],
    status_code=201,
)
async def create_promotion(
    data: PromotionCreate,
    service: PromotionService = Depends(get_promotion_service),
):
    """프로모션 생성"""
    promotion = await service.create_promotion(data)
    return create_response(
        data=PromotionResponse.model_validate(promotion),
        message="프로모션이 생성되었습니다.",
    )


@router.get("", response_model=ListAPIResponse[PromotionResponse])
async def get_promotions(
    page_params: PageParams = Depends(),
    active_only: bool = False,
    service: PromotionService = Depends(get_promotion_service),
):
    """프로모션 목록 조회"""
    promotions, total = await service.get_promotions(
        page=page_params.page,
        size=page_params.size,
        active_only=active_only,
    )
    return create_list_response(
        data=[PromotionResponse.model_validate(p) for p in promotions],
        total=total,
        page=page_params.page,
        size=page_params.size,
        message="프로모션 목록을 조회했습니다.",
    )


@router.get(
    "/{promotion_id}", response_model=APIResponse[PromotionResponse]
)
async def get_promotion(
    promotion_id: int,
    service: PromotionService = Depends(get_promotion_service),
):
    """프로모션 상세 조회"""
    promotion = await service.get_promotion(promotion_id)
    return create_response(
        data=PromotionResponse.model_validate(promotion),
        message="프로모션 정보를 조회했습니다.",
    )


@router.patch(
    "/{promotion_id}", response_model=APIResponse[PromotionResponse]
)
async def update_promotion(
    promotion_id: int,
    data: PromotionUpdate,
    service: PromotionService = Depends(get_promotion_service),
):
    """프로모션 수정"""
    promotion = await service.update_promotion(promotion_id, data)
    return create_response(
        data=PromotionResponse.model_validate(promotion),
        message="프로모션이 수정되었습니다.",
    )


@router.delete("/{promotion_id}", status_code=204)
async def delete_promotion(
    promotion_id: int,
    service: PromotionService = Depends(get_promotion_service),
):
    """프로모션 삭제"""
    await service.delete_promotion(promotion_id)
    return None


@router.post(
    "/{promotion_id}/click", response_model=APIResponse[None]
)
async def track_promotion_click(
    promotion_id: int,
    service: PromotionService = Depends(get_promotion_service),
):
    """프로모션 클릭 집계"""
    await service.track_click(promotion_id)
    return create_response(message="클릭이 집계되었습니다.")
