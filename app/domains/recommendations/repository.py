"""Recommendations 도메인 리포지토리"""

from typing import Optional, Sequence, cast

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.recommendations.models import ABTest, RecommendationLog


class RecommendationLogRepository:
    """추천 로그 리포지토리 (추가 전용)"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, log: RecommendationLog) -> RecommendationLog:
        """추천 로그 기록"""
        self.session.add(log)
        await self.session.flush()
        return log

    async def get_recent_by_user(
        self, user_id: int, limit: int = 100
    ) -> Sequence[RecommendationLog]:
        """사용자의 최근 추천 로그 조회 (최신순)

        Args:
            user_id: 사용자 ID
            limit: 조회할 최대 레코드 수

        Returns:
            추천 로그 목록
        """
        query = (
            select(RecommendationLog)
            .where(RecommendationLog.user_id == user_id)
            .order_by(desc(RecommendationLog.created_at))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return cast(Sequence[RecommendationLog], result.scalars().all())

    async def get_by_test(self, ab_test_id: int) -> Sequence[RecommendationLog]:
        """A/B 테스트에 속한 추천 로그 전체 조회"""
        query = (
            select(RecommendationLog)
            .where(RecommendationLog.ab_test_id == ab_test_id)
            .order_by(RecommendationLog.created_at)
        )
        result = await self.session.execute(query)
        return cast(Sequence[RecommendationLog], result.scalars().all())


class ABTestRepository:
    """A/B 테스트 리포지토리"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, ab_test_id: int) -> Optional[ABTest]:
        query = select(ABTest).where(ABTest.id == ab_test_id)
        result = await self.session.execute(query)
        return cast(Optional[ABTest], result.scalar_one_or_none())

    async def get_list(
        self, skip: int = 0, limit: int = 20, active_only: bool = False
    ) -> Sequence[ABTest]:
        """A/B 테스트 목록 조회 (최근 생성순)"""
        query = select(ABTest)
        if active_only:
            query = query.where(ABTest.is_active.is_(True))

        query = query.order_by(desc(ABTest.created_at)).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return cast(Sequence[ABTest], result.scalars().all())

    async def count(self, active_only: bool = False) -> int:
        query = select(func.count(ABTest.id))
        if active_only:
            query = query.where(ABTest.is_active.is_(True))

        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def create(self, ab_test: ABTest) -> ABTest:
        """A/B 테스트 생성"""
        self.session.add(ab_test)
        await self.session.flush()
        await self.session.refresh(ab_test)
        return ab_test

    async def update(self, ab_test: ABTest) -> ABTest:
        """A/B 테스트 수정"""
        await self.session.flush()
        await self.session.refresh(ab_test)
        return ab_test
