"""Behaviors 도메인 모델

- InteractionEvent: 사용자 행동 기록 (추가 전용, 수정하지 않음)
- UserInterestScore: (사용자, 태그)별 긍정 상호작용 누적 통계

행동 기록은 사용자 유사도 계산과 개인화 가중치 학습의
단일 원천 데이터입니다.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import (
    DateTime,
    Float,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class InteractionAction(str, Enum):
    """사용자 행동 종류"""

    VIEW = "view"
    LIKE = "like"
    DISLIKE = "dislike"
    SHARE = "share"
    SAVE = "save"
    CLICK = "click"
    COMPLETE = "complete"
    COMMENT = "comment"


# 관심 태그 갱신 대상이 되는 긍정 행동
POSITIVE_INTEREST_ACTIONS = frozenset(
    {InteractionAction.LIKE, InteractionAction.SAVE, InteractionAction.SHARE}
)


class InteractionEvent(Base):
    """사용자 행동 기록"""

    __tablename__ = "interaction_events"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="사용자 ID"
    )
    content_id: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="콘텐츠 ID"
    )
    action: Mapped[InteractionAction] = mapped_column(
        String(20), nullable=False, comment="행동 종류"
    )
    duration: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="체류 시간 (초)"
    )
    completion_rate: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, comment="완료율 (0~1)"
    )
    # `metadata`는 DeclarativeBase 예약어이므로 속성명만 변경
    event_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSONB, nullable=True, comment="추가 메타데이터"
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="발생 일시",
    )

    __table_args__ = (
        Index("ix_interaction_events_user_ts", "user_id", "timestamp"),
        Index("ix_interaction_events_content_user", "content_id", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<InteractionEvent(user_id={self.user_id}, "
            f"content_id={self.content_id}, action={self.action})>"
        )


class UserInterestScore(Base):
    """사용자 태그 관심도 통계

    긍정 행동(like/save/share)이 발생할 때마다 콘텐츠 태그별로
    interaction_count가 1씩 증가합니다. 태그는 소문자로 저장합니다.
    """

    __tablename__ = "user_interests"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, nullable=False, index=True, comment="사용자 ID"
    )
    tag: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="태그 (소문자)"
    )
    interaction_count: Mapped[int] = mapped_column(
        Integer, default=1, nullable=False, comment="긍정 상호작용 횟수"
    )
    last_interaction: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="마지막 상호작용 일시"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "tag", name="uq_user_interest_tag"),
    )

    def __repr__(self) -> str:
        return (
            f"<UserInterestScore(user_id={self.user_id}, tag={self.tag}, "
            f"count={self.interaction_count})>"
        )
