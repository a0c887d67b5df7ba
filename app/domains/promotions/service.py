"""Promotions 도메인 서비스

시즌 프로모션 관리(CRUD) 및 노출/클릭 집계 로직입니다.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.domains.promotions.exceptions import (
    InvalidPromotionPeriodException,
    PromotionNotFoundException,
)
from app.domains.promotions.models import SeasonalPromotion
from app.domains.promotions.repository import PromotionRepository
from app.domains.promotions.schemas import PromotionCreate, PromotionUpdate

logger = get_logger(__name__)


class PromotionService:
    """시즌 프로모션 서비스"""

    def __init__(self, session: AsyncSession):
        self.repository = PromotionRepository(session)

    async def get_promotion(self, promotion_id: int) -> SeasonalPromotion:
        """프로모션 조회

        Raises:
            PromotionNotFoundException: 프로모션을 찾을 수 없는 경우
        """
        promotion = await self.repository.get_by_id(promotion_id)
        if not promotion:
            raise PromotionNotFoundException(promotion_id=promotion_id)
        return promotion

    async def get_promotions(
        self, page: int = 1, size: int = 20, active_only: bool = False
    ) -> tuple[list[SeasonalPromotion], int]:
        """프로모션 목록 조회"""
        skip = (page - 1) * size
        promotions = await self.repository.get_list(
            skip=skip, limit=size, active_only=active_only
        )
        total = await self.repository.count(active_only=active_only)
        return list(promotions), total

    async def create_promotion(self, data: PromotionCreate) -> SeasonalPromotion:
        """프로모션 생성

        Raises:
            InvalidPromotionPeriodException: 종료 일시가 시작 일시 이전인 경우
        """
        if data.end_date <= data.start_date:
            raise InvalidPromotionPeriodException(
                start_date=data.start_date.isoformat(),
                end_date=data.end_date.isoformat(),
            )

        promotion = await self.repository.create(
            SeasonalPromotion(**data.model_dump())
        )

        logger.info(
            "Promotion created",
            extra={
                "request_id": get_request_id(),
                "promotion_id": promotion.id,
                "priority": promotion.priority,
            },
        )
        return promotion

    async def update_promotion(
        self, promotion_id: int, data: PromotionUpdate
    ) -> SeasonalPromotion:
        """프로모션 부분 수정

        Raises:
            PromotionNotFoundException: 프로모션을 찾을 수 없는 경우
            InvalidPromotionPeriodException: 수정 후 기간이 올바르지 않은 경우
        """
        promotion = await self.get_promotion(promotion_id)
        changes = data.model_dump(exclude_unset=True)

        start_date = changes.get("start_date", promotion.start_date)
        end_date = changes.get("end_date", promotion.end_date)
        if end_date <= start_date:
            raise InvalidPromotionPeriodException(
                start_date=start_date.isoformat(),
                end_date=end_date.isoformat(),
            )

        for field, value in changes.items():
            setattr(promotion, field, value)
        promotion = await self.repository.update(promotion)

        logger.info(
            "Promotion updated",
            extra={
                "request_id": get_request_id(),
                "promotion_id": promotion_id,
                "fields": sorted(changes),
            },
        )
        return promotion

    async def delete_promotion(self, promotion_id: int) -> None:
        """프로모션 삭제

        Raises:
            PromotionNotFoundException: 프로모션을 찾을 수 없는 경우
        """
        promotion = await self.get_promotion(promotion_id)
        await self.repository.delete(promotion)

        logger.info(
            "Promotion deleted",
            extra={"request_id": get_request_id(), "promotion_id": promotion_id},
        )

    async def track_click(self, promotion_id: int) -> None:
        """프로모션 클릭 집계

        Raises:
            PromotionNotFoundException: 프로모션을 찾을 수 없는 경우
        """
        await self.get_promotion(promotion_id)
        await self.repository.increment_clicks(promotion_id)
