"""Users 도메인 모델 정의

메인 서버의 건강 프로필을 동기화하여 추천 엔진에서 읽기 전용으로
사용합니다. 사용자 ID는 메인 서버에서 제공되며 자동 증가하지 않습니다.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ARRAY, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class UserProfile(Base):
    """사용자 건강 프로필 (메인 서버 동기화용)

    - constitution: 한의학 체질 분류 (예: qi-deficiency)
    - health_goals / chronic_conditions: 건강 관련성 점수에 사용
    - segments / region: 시즌 프로모션 타겟팅에 사용
    """

    __tablename__ = "user_profiles"

    user_id: Mapped[int] = mapped_column(
        primary_key=True,
        autoincrement=False,
        comment="메인 서버에서 제공하는 사용자 ID",
    )
    constitution: Mapped[Optional[str]] = mapped_column(
        String(50), nullable=True, comment="체질 분류 태그"
    )
    health_goals: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="건강 목표 목록",
    )
    chronic_conditions: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="만성 질환 목록",
    )
    preference_tags: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="선호 태그 목록",
    )
    segments: Mapped[list[str]] = mapped_column(
        ARRAY(String),
        nullable=False,
        default=list,
        server_default="{}",
        comment="사용자 세그먼트 (프로모션 타겟팅)",
    )
    region: Mapped[Optional[str]] = mapped_column(
        String(50), nullable=True, comment="지역 코드"
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
    last_sync_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="마지막 동기화 일시"
    )

    @property
    def health_terms(self) -> list[str]:
        """건강 관련성 매칭에 사용하는 용어 목록 (체질 + 질환 + 목표)"""
        terms: list[str] = []
        if self.constitution:
            terms.append(self.constitution)
        terms.extend(self.chronic_conditions or [])
        terms.extend(self.health_goals or [])
        return terms

    def __repr__(self) -> str:
        return (
            f"<UserProfile(user_id={self.user_id}, "
            f"constitution={self.constitution}, region={self.region})>"
        )
