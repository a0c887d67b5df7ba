"""Promotions 도메인 스키마 정의"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _lower_tags(tags: Optional[list[str]]) -> Optional[list[str]]:
    """콘텐츠 태그와 같이 소문자로 저장 (공백/중복 제거)"""
    if tags is None:
        return None
    return list(dict.fromkeys(t.strip().lower() for t in tags if t.strip()))


class PromotionBase(BaseModel):
    """프로모션 공통 필드"""

    description: Optional[str] = Field(None, description="설명")
    priority: int = Field(1, ge=1, le=100, description="우선순위")
    promoted_content: list[int] = Field(
        default_factory=list, description="프로모션 콘텐츠 ID 목록"
    )
    boosted_tags: list[str] = Field(
        default_factory=list, description="부스트 태그"
    )
    boosted_content_types: list[str] = Field(
        default_factory=list, description="부스트 콘텐츠 타입"
    )
    target_user_segments: list[str] = Field(
        default_factory=list, description="대상 세그먼트"
    )
    regions: list[str] = Field(default_factory=list, description="대상 지역")
    global_boost_factor: float = Field(
        1.3, ge=1.0, le=3.0, description="부스트 배율"
    )

    @field_validator("boosted_tags")
    @classmethod
    def normalize_boosted_tags(cls, v: list[str]) -> list[str]:
        return _lower_tags(v)


class PromotionCreate(PromotionBase):
    """프로모션 생성 요청"""

    name: str = Field(..., min_length=1, max_length=200, description="이름")
    start_date: datetime = Field(..., description="시작 일시")
    end_date: datetime = Field(..., description="종료 일시")
    is_active: bool = True


class PromotionUpdate(BaseModel):
    """프로모션 수정 요청 (부분 수정)"""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = Field(None, ge=1, le=100)
    promoted_content: Optional[list[int]] = None
    boosted_tags: Optional[list[str]] = None
    boosted_content_types: Optional[list[str]] = None
    target_user_segments: Optional[list[str]] = None
    regions: Optional[list[str]] = None
    global_boost_factor: Optional[float] = Field(None, ge=1.0, le=3.0)

    @field_validator("boosted_tags")
    @classmethod
    def normalize_boosted_tags(
        cls, v: Optional[list[str]]
    ) -> Optional[list[str]]:
        return _lower_tags(v)


class PromotionResponse(BaseModel):
    """프로모션 응답"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    is_active: bool
    priority: int
    promoted_content: list[int]
    boosted_tags: list[str]
    boosted_content_types: list[str]
    target_user_segments: list[str]
    regions: list[str]
    global_boost_factor: Optional[float] = None
    is_automatic: bool
    impressions: int
    clicks: int
    created_at: datetime
    updated_at: Optional[datetime] = None
