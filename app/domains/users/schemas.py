"""Users 도메인 스키마 정의

메인 서버와의 건강 프로필 동기화를 위한 Pydantic 스키마입니다.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserProfileSync(BaseModel):
    """사용자 프로필 동기화 요청 스키마"""

    constitution: Optional[str] = Field(
        None, max_length=50, description="체질 분류 태그"
    )
    health_goals: list[str] = Field(
        default_factory=list, max_length=50, description="건강 목표"
    )
    chronic_conditions: list[str] = Field(
        default_factory=list, max_length=50, description="만성 질환"
    )
    preference_tags: list[str] = Field(
        default_factory=list, max_length=100, description="선호 태그"
    )
    segments: list[str] = Field(
        default_factory=list, max_length=20, description="사용자 세그먼트"
    )
    region: Optional[str] = Field(None, max_length=50, description="지역 코드")


class UserProfileResponse(BaseModel):
    """사용자 프로필 응답 스키마"""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    constitution: Optional[str] = None
    health_goals: list[str]
    chronic_conditions: list[str]
    preference_tags: list[str]
    segments: list[str]
    region: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    last_sync_at: Optional[datetime] = None
