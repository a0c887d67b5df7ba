"""추천 엔진 저장소 묶음

추천 엔진이 사용하는 모든 리포지토리를 하나의 세션 위에 묶습니다.
병렬 조회 분기는 `StoreFactory`로 각자의 저장소(세션)를 엽니다.
"""

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import async_session_maker, session_scope
from app.domains.behaviors.repository import (
    BehaviorRepository,
    InterestRepository,
)
from app.domains.contents.repository import ContentRepository
from app.domains.promotions.repository import PromotionRepository
from app.domains.recommendations.repository import (
    ABTestRepository,
    RecommendationLogRepository,
)
from app.domains.users.repository import UserProfileRepository


class RecommendationStore:
    """하나의 세션을 공유하는 리포지토리 묶음"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.contents = ContentRepository(session)
        self.profiles = UserProfileRepository(session)
        self.behaviors = BehaviorRepository(session)
        self.interests = InterestRepository(session)
        self.promotions = PromotionRepository(session)
        self.logs = RecommendationLogRepository(session)
        self.ab_tests = ABTestRepository(session)


StoreFactory = Callable[[], AsyncContextManager[RecommendationStore]]


def make_store_factory(
    session_maker: async_sessionmaker[AsyncSession] = async_session_maker,
) -> StoreFactory:
    """세션 팩토리로부터 저장소 팩토리 생성

    열린 저장소는 컨텍스트 종료 시 커밋(예외 시 롤백)됩니다.
    """

    @asynccontextmanager
    async def open_store() -> AsyncIterator[RecommendationStore]:
        async with session_scope(session_maker) as session:
            yield RecommendationStore(session)

    return open_store


open_store = make_store_factory()
