"""Users 도메인 서비스

메인 서버 건강 프로필 동기화를 위한 비즈니스 로직 계층입니다.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.core.utils.datetime import now_utc
from app.domains.users.exceptions import UserProfileNotFoundException
from app.domains.users.models import UserProfile
from app.domains.users.repository import UserProfileRepository
from app.domains.users.schemas import UserProfileSync

logger = get_logger(__name__)


class UserProfileService:
    """사용자 프로필 서비스"""

    def __init__(self, session: AsyncSession):
        self.repository = UserProfileRepository(session)

    async def get_profile(self, user_id: int) -> UserProfile:
        """프로필 조회

        Raises:
            UserProfileNotFoundException: 프로필을 찾을 수 없는 경우
        """
        profile = await self.repository.get_by_user_id(user_id)
        if not profile:
            raise UserProfileNotFoundException(user_id=user_id)
        return profile

    async def upsert_profile(
        self, user_id: int, data: UserProfileSync
    ) -> UserProfile:
        """프로필 Upsert (생성 또는 전체 갱신)

        Args:
            user_id: 사용자 ID
            data: 프로필 동기화 데이터

        Returns:
            생성 또는 업데이트된 프로필 객체
        """
        existing = await self.repository.get_by_user_id(user_id)

        if existing:
            existing.constitution = data.constitution
            existing.health_goals = data.health_goals
            existing.chronic_conditions = data.chronic_conditions
            existing.preference_tags = data.preference_tags
            existing.segments = data.segments
            existing.region = data.region
            existing.last_sync_at = now_utc()
            profile = await self.repository.update(existing)
            action = "updated"
        else:
            profile = await self.repository.create(
                UserProfile(
                    user_id=user_id,
                    constitution=data.constitution,
                    health_goals=data.health_goals,
                    chronic_conditions=data.chronic_conditions,
                    preference_tags=data.preference_tags,
                    segments=data.segments,
                    region=data.region,
                    last_sync_at=now_utc(),
                )
            )
            action = "created"

        logger.info(
            "User profile synced",
            extra={
                "request_id": get_request_id(),
                "user_id": user_id,
                "action": action,
            },
        )
        return profile
