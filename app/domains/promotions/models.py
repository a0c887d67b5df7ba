"""Promotions 도메인 모델

운영자가 관리하는 시즌 프로모션입니다. 추천 엔진의 시즌 부스트
단계에서 읽기 전용으로 사용됩니다.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    ARRAY,
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base

# regions에 포함되면 모든 지역에 적용
GLOBAL_REGION = "global"


class SeasonalPromotion(Base):
    """시즌 프로모션

    부스트 적용 방식:
    - promoted_content: 명시된 콘텐츠 점수 × global_boost_factor
    - boosted_tags: 1 + (일치 태그 비율 × (boost - 1))
    - boosted_content_types: 콘텐츠 타입 일치 시 × global_boost_factor
    """

    __tablename__ = "seasonal_promotions"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(
        String(200), nullable=False, comment="프로모션 이름"
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="설명"
    )
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, comment="시작 일시"
    )
    end_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, comment="종료 일시"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
        comment="활성 여부",
    )
    priority: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        server_default="1",
        comment="우선순위 (높을수록 먼저 적용)",
    )
    promoted_content: Mapped[list[int]] = mapped_column(
        ARRAY(Integer),
        nullable=False,
        default=list,
        server_default="{}",
        comment="명시적 프로모션 콘텐츠 ID 목록",
    )
    boosted_tags: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="부스트 태그 목록",
    )
    boosted_content_types: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="부스트 콘텐츠 타입 목록",
    )
    target_user_segments: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="대상 사용자 세그먼트 (비어 있으면 전체)",
    )
    regions: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="대상 지역 (비어 있거나 global이면 전체)",
    )
    global_boost_factor: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        default=1.3,
        comment="부스트 배율 (1~3)",
    )
    is_automatic: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="TCM 절기 자동 생성 여부",
    )
    impressions: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0", comment="노출 수"
    )
    clicks: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0", comment="클릭 수"
    )
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
            "ix_seasonal_promotions_active_period",
            "start_date",
            "end_date",
            postgresql_where=text("is_active"),
        ),
    )

    def is_running(self, now: datetime) -> bool:
        """활성 상태이며 기간 내인지 여부"""
        return self.is_active and self.start_date <= now <= self.end_date

    def targets(
        self, segments: Optional[list[str]], region: Optional[str]
    ) -> bool:
        """사용자 세그먼트/지역 타겟팅 일치 여부"""
        if self.target_user_segments:
            if not segments or not set(self.target_user_segments) & set(
                segments
            ):
                return False

        if self.regions and GLOBAL_REGION not in self.regions:
            if not region or region not in self.regions:
                return False

        return True

    def __repr__(self) -> str:
        return (
            f"<SeasonalPromotion(id={self.id}, name={self.name}, "
            f"priority={self.priority}, active={self.is_active})>"
        )
