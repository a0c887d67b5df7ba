"""Behaviors 도메인 리포지토리

사용자 행동 기록과 태그 관심도 통계를 조회하고 관리합니다.
"""

from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional, Sequence, cast

from sqlalchemy import desc, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.utils.datetime import now_utc
from app.domains.behaviors.models import (
    InteractionAction,
    InteractionEvent,
    UserInterestScore,
)


class BehaviorRepository:
    """사용자 행동 기록 리포지토리 (추가 전용)"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event: InteractionEvent) -> InteractionEvent:
        """행동 기록 추가

        Args:
            event: 추가할 행동 기록

        Returns:
            저장된 행동 기록
        """
        self.session.add(event)
        await self.session.flush()
        return event

    async def get_recent_by_user(
        self,
        user_id: int,
        limit: int = 100,
        actions: Optional[Iterable[InteractionAction]] = None,
    ) -> Sequence[InteractionEvent]:
        """사용자의 최근 행동 기록 조회 (최신순)

        Args:
            user_id: 사용자 ID
            limit: 조회할 최대 레코드 수
            actions: 행동 종류 필터

        Returns:
            행동 기록 목록
        """
        query = select(InteractionEvent).where(
            InteractionEvent.user_id == user_id
        )
        if actions is not None:
            query = query.where(InteractionEvent.action.in_(list(actions)))

        query = query.order_by(desc(InteractionEvent.timestamp)).limit(limit)
        result = await self.session.execute(query)
        return cast(Sequence[InteractionEvent], result.scalars().all())

    async def get_by_user_and_contents(
        self,
        user_id: int,
        content_ids: Iterable[int],
        since: Optional[datetime] = None,
    ) -> Sequence[InteractionEvent]:
        """특정 콘텐츠들에 대한 사용자 행동 조회 (추천 성과 분석용)"""
        ids = list(set(content_ids))
        if not ids:
            return []

        query = select(InteractionEvent).where(
            InteractionEvent.user_id == user_id,
            InteractionEvent.content_id.in_(ids),
        )
        if since is not None:
            query = query.where(InteractionEvent.timestamp >= since)

        query = query.order_by(desc(InteractionEvent.timestamp))
        result = await self.session.execute(query)
        return cast(Sequence[InteractionEvent], result.scalars().all())

    async def get_by_users_and_contents(
        self,
        user_ids: Iterable[int],
        content_ids: Iterable[int],
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Sequence[InteractionEvent]:
        """사용자 집합 × 콘텐츠 집합 행동 조회 (A/B 테스트 결과 집계용)"""
        users = list(set(user_ids))
        contents = list(set(content_ids))
        if not users or not contents:
            return []

        query = select(InteractionEvent).where(
            InteractionEvent.user_id.in_(users),
            InteractionEvent.content_id.in_(contents),
        )
        if since is not None:
            query = query.where(InteractionEvent.timestamp >= since)
        if until is not None:
            query = query.where(InteractionEvent.timestamp <= until)

        result = await self.session.execute(query)
        return cast(Sequence[InteractionEvent], result.scalars().all())

    async def get_user_content_pairs(
        self, content_ids: Iterable[int], exclude_user_id: int
    ) -> list[tuple[int, int]]:
        """특정 콘텐츠를 이용한 다른 사용자의 (user_id, content_id) 쌍 조회

        유사 사용자 후보를 찾기 위한 역인덱스 조회입니다.
        """
        ids = list(set(content_ids))
        if not ids:
            return []

        query = (
            select(InteractionEvent.user_id, InteractionEvent.content_id)
            .where(
                InteractionEvent.content_id.in_(ids),
                InteractionEvent.user_id != exclude_user_id,
            )
            .distinct()
        )
        result = await self.session.execute(query)
        return [(int(row[0]), int(row[1])) for row in result.all()]

    async def get_content_sets(
        self, user_ids: Iterable[int]
    ) -> dict[int, set[int]]:
        """사용자별 상호작용 콘텐츠 ID 집합 조회

        Args:
            user_ids: 사용자 ID 목록

        Returns:
            {user_id: {content_id, ...}}
        """
        users = list(set(user_ids))
        if not users:
            return {}

        query = (
            select(InteractionEvent.user_id, InteractionEvent.content_id)
            .where(InteractionEvent.user_id.in_(users))
            .distinct()
        )
        result = await self.session.execute(query)

        content_sets: dict[int, set[int]] = defaultdict(set)
        for user_id, content_id in result.all():
            content_sets[int(user_id)].add(int(content_id))
        return dict(content_sets)

    async def get_recent_by_users(
        self,
        user_ids: Iterable[int],
        actions: Iterable[InteractionAction],
        limit: int = 500,
    ) -> Sequence[InteractionEvent]:
        """여러 사용자의 최근 행동 조회 (협업 필터링 투표용)"""
        users = list(set(user_ids))
        if not users:
            return []

        query = (
            select(InteractionEvent)
            .where(
                InteractionEvent.user_id.in_(users),
                InteractionEvent.action.in_(list(actions)),
            )
            .order_by(desc(InteractionEvent.timestamp))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return cast(Sequence[InteractionEvent], result.scalars().all())

    async def get_viewed_content_ids(self, user_id: int) -> set[int]:
        """사용자가 조회(view)한 콘텐츠 ID 집합"""
        query = (
            select(InteractionEvent.content_id)
            .where(
                InteractionEvent.user_id == user_id,
                InteractionEvent.action == InteractionAction.VIEW,
            )
            .distinct()
        )
        result = await self.session.execute(query)
        return {int(content_id) for content_id in result.scalars().all()}


class InterestRepository:
    """사용자 태그 관심도 리포지토리"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user(
        self, user_id: int, limit: Optional[int] = None
    ) -> Sequence[UserInterestScore]:
        """사용자 관심 태그 조회 (상호작용 횟수 내림차순)

        Args:
            user_id: 사용자 ID
            limit: 조회할 최대 태그 수

        Returns:
            관심도 목록
        """
        query = (
            select(UserInterestScore)
            .where(UserInterestScore.user_id == user_id)
            .order_by(
                desc(UserInterestScore.interaction_count),
                desc(UserInterestScore.last_interaction),
            )
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return cast(Sequence[UserInterestScore], result.scalars().all())

    async def increment(self, user_id: int, tag: str) -> None:
        """태그 관심도 1 증가 (없으면 생성)

        동시 요청 간 경합은 허용합니다 (카운트 근사치로 충분).

        Args:
            user_id: 사용자 ID
            tag: 태그 (소문자로 정규화됨)
        """
        normalized = tag.strip().lower()
        if not normalized:
            return

        now = now_utc()
        # PostgreSQL INSERT ... ON CONFLICT DO UPDATE (UPSERT)
        stmt = insert(UserInterestScore).values(
            user_id=user_id,
            tag=normalized,
            interaction_count=1,
            last_interaction=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "tag"],
            set_={
                "interaction_count": UserInterestScore.interaction_count + 1,
                "last_interaction": now,
            },
        )
        await self.session.execute(stmt)
