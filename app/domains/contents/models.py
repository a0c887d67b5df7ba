"""Contents 도메인 모델 정의

추천 대상이 되는 웰니스 콘텐츠(아티클, 레시피, 퀴즈, 튜토리얼, 영상)
모델입니다. 콘텐츠 본문은 메인 서버가 관리하며, 이 서비스는 추천에
필요한 메타데이터만 동기화하여 보관합니다.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import (
    ARRAY,
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class ContentType(str, Enum):
    """콘텐츠 타입"""

    ARTICLE = "article"
    RECIPE = "recipe"
    QUIZ = "quiz"
    TUTORIAL = "tutorial"
    VIDEO = "video"
    PODCAST = "podcast"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ContentType"]:
        """문자열을 콘텐츠 타입으로 변환

        "all", 빈 값, 알 수 없는 타입은 None(전체)으로 취급합니다.
        """
        if not value or value == "all":
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class TimeOfDay(str, Enum):
    """하루 중 시간대 구분"""

    MORNING = "morning"  # 05~11시
    AFTERNOON = "afternoon"  # 12~17시
    EVENING = "evening"  # 18~22시
    NIGHT = "night"  # 그 외

    @classmethod
    def from_hour(cls, hour: int) -> "TimeOfDay":
        if 5 <= hour < 12:
            return cls.MORNING
        if 12 <= hour < 18:
            return cls.AFTERNOON
        if 18 <= hour < 23:
            return cls.EVENING
        return cls.NIGHT


class ContentItem(Base):
    """추천 대상 콘텐츠 모델

    ID는 메인 서버에서 제공되므로 자동 증가하지 않습니다.
    게시 이후에는 카운터(view/like)와 활성 여부만 변경됩니다.
    """

    __tablename__ = "contents"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        comment="콘텐츠 ID (메인 서버 동기화)",
    )
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="콘텐츠 제목",
    )
    content_type: Mapped[ContentType] = mapped_column(
        String(20),
        nullable=False,
        comment="콘텐츠 타입 (article/recipe/quiz/tutorial/video/podcast)",
    )
    tags: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="태그 목록 (순서 유지, 첫 번째 태그가 대표 태그)",
    )
    time_of_day_relevance: Mapped[Optional[dict[str, float]]] = mapped_column(
        JSONB,
        nullable=True,
        comment="시간대별 적합도 (morning/afternoon/evening/night → 0~1)",
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="게시 일시",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
        comment="활성 여부",
    )
    view_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        comment="조회수",
    )
    like_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        comment="좋아요 수",
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="생성 일시",
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
        comment="수정 일시",
    )

    __table_args__ = (
        Index(
            "ix_contents_active_published",
            "published_at",
            postgresql_where=text("is_active"),
        ),
        Index("ix_contents_content_type", "content_type"),
        Index("ix_contents_popularity", "view_count", "published_at"),
        Index("ix_contents_tags", "tags", postgresql_using="gin"),
    )

    @property
    def primary_tag(self) -> Optional[str]:
        """대표 태그 (첫 번째 태그)"""
        return self.tags[0] if self.tags else None

    def __repr__(self) -> str:
        return (
            f"<ContentItem(id={self.id}, type={self.content_type}, "
            f"active={self.is_active}, views={self.view_count})>"
        )
