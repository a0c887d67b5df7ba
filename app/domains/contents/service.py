"""Contents 도메인 서비스

메인 서버 콘텐츠 메타데이터 동기화 및 조회 비즈니스 로직 계층입니다.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id
from app.domains.contents.exceptions import ContentNotFoundException
from app.domains.contents.models import ContentItem
from app.domains.contents.repository import ContentFilters, ContentRepository
from app.domains.contents.schemas import ContentListRequest, ContentSyncRequest

logger = get_logger(__name__)


class ContentService:
    """콘텐츠 서비스"""

    def __init__(self, session: AsyncSession):
        self.repository = ContentRepository(session)

    async def get_content(self, content_id: int) -> ContentItem:
        """콘텐츠 조회

        Raises:
            ContentNotFoundException: 콘텐츠를 찾을 수 없는 경우
        """
        content = await self.repository.get_by_id(content_id)
        if not content:
            raise ContentNotFoundException(content_id=content_id)
        return content

    async def get_contents(
        self,
        filters: ContentListRequest,
        page: int = 1,
        size: int = 20,
    ) -> tuple[list[ContentItem], int]:
        """콘텐츠 목록 조회

        Args:
            filters: 목록 필터
            page: 페이지 번호
            size: 페이지 크기

        Returns:
            (콘텐츠 목록, 전체 콘텐츠 수) 튜플
        """
        repo_filters = ContentFilters(
            content_type=filters.content_type,
            any_tags=filters.tags,
            active_only=not filters.include_inactive,
        )
        skip = (page - 1) * size
        contents = await self.repository.find(
            repo_filters, skip=skip, limit=size
        )
        total = await self.repository.count(repo_filters)
        return list(contents), total

    async def sync_content(self, data: ContentSyncRequest) -> ContentItem:
        """콘텐츠 동기화 (Upsert)

        - 존재하지 않으면 생성
        - 이미 존재하면 메타데이터 갱신 (카운터는 유지)

        Args:
            data: 콘텐츠 동기화 데이터

        Returns:
            생성 또는 업데이트된 콘텐츠 객체
        """
        relevance = None
        if data.time_of_day_relevance:
            relevance = {
                slot.value: value
                for slot, value in data.time_of_day_relevance.items()
            }
        existing = await self.repository.get_by_id(data.content_id)

        if existing:
            existing.title = data.title
            existing.content_type = data.content_type
            existing.tags = data.tags
            existing.time_of_day_relevance = relevance
            existing.published_at = data.published_at
            existing.is_active = data.is_active
            content = await self.repository.update(existing)
            action = "updated"
        else:
            content = await self.repository.create(
                ContentItem(
                    id=data.content_id,
                    title=data.title,
                    content_type=data.content_type,
                    tags=data.tags,
                    time_of_day_relevance=relevance,
                    published_at=data.published_at,
                    is_active=data.is_active,
                    view_count=0,
                    like_count=0,
                )
            )
            action = "created"

        logger.info(
            "Content synced",
            extra={
                "request_id": get_request_id(),
                "content_id": content.id,
                "action": action,
            },
        )
        return content

    async def deactivate_content(self, content_id: int) -> ContentItem:
        """콘텐츠 비활성화 (추천 대상에서 제외)

        Raises:
            ContentNotFoundException: 콘텐츠를 찾을 수 없는 경우
        """
        content = await self.get_content(content_id)
        content.is_active = False
        content = await self.repository.update(content)

        logger.info(
            "Content deactivated",
            extra={"request_id": get_request_id(), "content_id": content_id},
        )
        return content
