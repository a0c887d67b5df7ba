"""Users 도메인 리포지토리

사용자 건강 프로필 조회/동기화를 위한 데이터 접근 계층입니다.
"""

from typing import Optional, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.users.models import UserProfile


class UserProfileRepository:
    """사용자 프로필 리포지토리"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: int) -> Optional[UserProfile]:
        """사용자 ID로 프로필 조회

        Args:
            user_id: 사용자 ID

        Returns:
            프로필 객체 또는 None
        """
        query = select(UserProfile).where(UserProfile.user_id == user_id)
        result = await self.session.execute(query)
        return cast(Optional[UserProfile], result.scalar_one_or_none())

    async def create(self, profile: UserProfile) -> UserProfile:
        """프로필 생성"""
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def update(self, profile: UserProfile) -> UserProfile:
        """프로필 수정"""
        await self.session.flush()
        await self.session.refresh(profile)
        return profile
