"""Recommendations 도메인 모델

- RecommendationLog: 추천 결과 기록 (알고리즘 성과 분석, A/B 테스트 집계용)
- ABTest: 추천 알고리즘 A/B 테스트 정의
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    ARRAY,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class ABTest(Base):
    """추천 알고리즘 A/B 테스트

    variants 형식: [{"name": "control", "algorithm": "hybrid"}, ...]
    사용자는 해시 기반으로 결정적으로 변형에 배정됩니다.
    """

    __tablename__ = "ab_tests"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(
        String(200), nullable=False, comment="테스트 이름"
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="설명"
    )
    variants: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, comment="변형 목록 (name, algorithm)"
    )
    target_user_percentage: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=100,
        server_default="100",
        comment="테스트 대상 사용자 비율 (0~100)",
    )
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, comment="시작 일시"
    )
    end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="종료 일시"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
        comment="활성 여부",
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

    def is_running(self, now: datetime) -> bool:
        """활성 상태이며 기간 내인지 여부"""
        if not self.is_active or self.start_date > now:
            return False
        return self.end_date is None or now <= self.end_date

    def __repr__(self) -> str:
        return (
            f"<ABTest(id={self.id}, name={self.name}, "
            f"variants={len(self.variants or [])}, active={self.is_active})>"
        )


class RecommendationLog(Base):
    """추천 결과 로그 (추가 전용)"""

    __tablename__ = "recommendation_logs"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="사용자 ID"
    )
    content_ids: Mapped[list[int]] = mapped_column(
        ARRAY(Integer),
        nullable=False,
        default=list,
        server_default="{}",
        comment="추천된 콘텐츠 ID (순위순)",
    )
    algorithm: Mapped[str] = mapped_column(
        String(50), nullable=False, comment="사용된 알고리즘"
    )
    scores: Mapped[list[float]] = mapped_column(
        JSONB, nullable=False, default=list, comment="콘텐츠별 점수 (content_ids 순서)"
    )
    ab_test_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("ab_tests.id", ondelete="SET NULL"),
        nullable=True,
        comment="A/B 테스트 ID",
    )
    ab_test_variant: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="배정된 변형 이름"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="추천 일시",
    )

    __table_args__ = (
        Index("ix_recommendation_logs_user_created", "user_id", "created_at"),
        Index("ix_recommendation_logs_ab_test", "ab_test_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<RecommendationLog(user_id={self.user_id}, "
            f"algorithm={self.algorithm}, items={len(self.content_ids or [])})>"
        )
