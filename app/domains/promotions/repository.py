"""Promotions 도메인 리포지토리"""

from datetime import datetime
from typing import Optional, Sequence, cast

from sqlalchemy import and_, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.promotions.models import SeasonalPromotion


class PromotionRepository:
    """시즌 프로모션 리포지토리"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, promotion_id: int) -> Optional[SeasonalPromotion]:
        """ID로 프로모션 조회"""
        query = select(SeasonalPromotion).where(
            SeasonalPromotion.id == promotion_id
        )
        result = await self.session.execute(query)
        return cast(Optional[SeasonalPromotion], result.scalar_one_or_none())

    async def get_active(self, now: datetime) -> Sequence[SeasonalPromotion]:
        """현재 진행 중인 프로모션 조회 (우선순위 내림차순)

        Args:
            now: 기준 시각

        Returns:
            프로모션 목록
        """
        query = (
            select(SeasonalPromotion)
            .where(
                and_(
                    SeasonalPromotion.is_active.is_(True),
                    SeasonalPromotion.start_date <= now,
                    SeasonalPromotion.end_date >= now,
                )
            )
            .order_by(desc(SeasonalPromotion.priority), SeasonalPromotion.id)
        )
        result = await self.session.execute(query)
        return cast(Sequence[SeasonalPromotion], result.scalars().all())

    async def get_list(
        self,
        skip: int = 0,
        limit: int = 20,
        active_only: bool = False,
    ) -> Sequence[SeasonalPromotion]:
        """프로모션 목록 조회 (최근 시작순)"""
        query = select(SeasonalPromotion)
        if active_only:
            query = query.where(SeasonalPromotion.is_active.is_(True))

        query = (
            query.order_by(desc(SeasonalPromotion.start_date))
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return cast(Sequence[SeasonalPromotion], result.scalars().all())

    async def count(self, active_only: bool = False) -> int:
        """프로모션 수 조회"""
        query = select(func.count(SeasonalPromotion.id))
        if active_only:
            query = query.where(SeasonalPromotion.is_active.is_(True))

        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def create(self, promotion: SeasonalPromotion) -> SeasonalPromotion:
        """프로모션 생성"""
        self.session.add(promotion)
        await self.session.flush()
        await self.session.refresh(promotion)
        return promotion

    async def update(self, promotion: SeasonalPromotion) -> SeasonalPromotion:
        """프로모션 수정"""
        await self.session.flush()
        await self.session.refresh(promotion)
        return promotion

    async def delete(self, promotion: SeasonalPromotion) -> None:
        """프로모션 삭제"""
        await self.session.delete(promotion)
        await self.session.flush()

    async def increment_impressions(self, promotion_ids: list[int]) -> None:
        """노출 수 1 증가"""
        if not promotion_ids:
            return
        stmt = (
            update(SeasonalPromotion)
            .where(SeasonalPromotion.id.in_(promotion_ids))
            .values(impressions=SeasonalPromotion.impressions + 1)
        )
        await self.session.execute(stmt)

    async def increment_clicks(self, promotion_id: int) -> None:
        """클릭 수 1 증가"""
        stmt = (
            update(SeasonalPromotion)
            .where(SeasonalPromotion.id == promotion_id)
            .values(clicks=SeasonalPromotion.clicks + 1)
        )
        await self.session.execute(stmt)
