"""Contents 도메인 리포지토리

추천 후보 조회, 인기순 조회, 카운터 증가를 위한 데이터 접근 계층입니다.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence, cast

from sqlalchemy import Select, and_, func, not_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.contents.models import ContentItem, ContentType


class ContentOrder(str, Enum):
    """콘텐츠 정렬 기준"""

    RECENT = "recent"  # published_at desc
    POPULAR = "popular"  # view_count desc, published_at desc


@dataclass
class ContentFilters:
    """콘텐츠 조회 필터

    모든 필드는 선택적이며, 제공된 필터만 적용됩니다.
    """

    content_type: Optional[ContentType] = None
    ids: Optional[list[int]] = None
    any_tags: Optional[list[str]] = None
    exclude_tags: Optional[list[str]] = None
    exclude_ids: Optional[list[int]] = None
    active_only: bool = True
    published_before: Optional[datetime] = None


def _lower_tags(tags: list[str]) -> list[str]:
    return [tag.lower() for tag in tags]


class ContentRepository:
    """콘텐츠 리포지토리"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _apply_filters(
        self, query: Select, filters: Optional[ContentFilters]
    ) -> Select:
        if not filters:
            return query

        conditions = []
        if filters.active_only:
            conditions.append(ContentItem.is_active.is_(True))

        if filters.content_type:
            conditions.append(ContentItem.content_type == filters.content_type)

        if filters.ids is not None:
            conditions.append(ContentItem.id.in_(filters.ids))

        # 태그는 소문자로 저장되므로 조건도 소문자로 비교
        if filters.any_tags:
            # PostgreSQL ARRAY overlap (OR 로직)
            conditions.append(
                ContentItem.tags.overlap(_lower_tags(filters.any_tags))
            )

        if filters.exclude_tags:
            conditions.append(
                not_(ContentItem.tags.overlap(_lower_tags(filters.exclude_tags)))
            )

        if filters.exclude_ids:
            conditions.append(ContentItem.id.not_in(filters.exclude_ids))

        if filters.published_before:
            conditions.append(
                or_(
                    ContentItem.published_at.is_(None),
                    ContentItem.published_at <= filters.published_before,
                )
            )

        if conditions:
            query = query.where(and_(*conditions))
        return query

    async def get_by_id(self, content_id: int) -> Optional[ContentItem]:
        """ID로 콘텐츠 조회

        Args:
            content_id: 콘텐츠 ID

        Returns:
            콘텐츠 객체 또는 None
        """
        query = select(ContentItem).where(ContentItem.id == content_id)
        result = await self.session.execute(query)
        return cast(Optional[ContentItem], result.scalar_one_or_none())

    async def get_by_ids(
        self, content_ids: list[int], active_only: bool = True
    ) -> Sequence[ContentItem]:
        """ID 목록으로 콘텐츠 조회 (순서 보장 없음)

        Args:
            content_ids: 콘텐츠 ID 목록
            active_only: 활성 콘텐츠만 조회 여부

        Returns:
            콘텐츠 목록
        """
        if not content_ids:
            return []

        return await self.find(
            ContentFilters(ids=list(content_ids), active_only=active_only),
            limit=None,
        )

    async def find(
        self,
        filters: Optional[ContentFilters] = None,
        order: ContentOrder = ContentOrder.RECENT,
        skip: int = 0,
        limit: Optional[int] = 20,
    ) -> Sequence[ContentItem]:
        """필터/정렬/페이지네이션 조회

        Args:
            filters: 필터 옵션
            order: 정렬 기준
            skip: 건너뛸 레코드 수
            limit: 조회할 최대 레코드 수 (None이면 제한 없음)

        Returns:
            콘텐츠 목록
        """
        query = self._apply_filters(select(ContentItem), filters)

        if order == ContentOrder.POPULAR:
            query = query.order_by(
                ContentItem.view_count.desc(),
                ContentItem.published_at.desc().nulls_last(),
                ContentItem.id.desc(),
            )
        else:
            query = query.order_by(
                ContentItem.published_at.desc().nulls_last(),
                ContentItem.id.desc(),
            )

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return cast(Sequence[ContentItem], result.scalars().all())

    async def count(self, filters: Optional[ContentFilters] = None) -> int:
        """콘텐츠 수 조회

        Args:
            filters: 필터 옵션 (find와 동일)

        Returns:
            콘텐츠 수
        """
        query = self._apply_filters(
            select(func.count(ContentItem.id)), filters
        )
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def create(self, content: ContentItem) -> ContentItem:
        """콘텐츠 생성"""
        self.session.add(content)
        await self.session.flush()
        await self.session.refresh(content)
        return content

    async def update(self, content: ContentItem) -> ContentItem:
        """콘텐츠 수정"""
        await self.session.flush()
        await self.session.refresh(content)
        return content

    async def increment_view_count(self, content_id: int) -> None:
        """조회수 1 증가"""
        stmt = (
            update(ContentItem)
            .where(ContentItem.id == content_id)
            .values(view_count=ContentItem.view_count + 1)
        )
        await self.session.execute(stmt)

    async def increment_like_count(self, content_id: int) -> None:
        """좋아요 수 1 증가"""
        stmt = (
            update(ContentItem)
            .where(ContentItem.id == content_id)
            .values(like_count=ContentItem.like_count + 1)
        )
        await self.session.execute(stmt)
