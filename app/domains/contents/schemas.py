"""Contents 도메인 스키마 정의

메인 서버와의 콘텐츠 메타데이터 동기화를 위한 Pydantic 스키마입니다.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domains.contents.models import ContentType, TimeOfDay

# Request Schemas


class ContentSyncRequest(BaseModel):
    """콘텐츠 동기화 요청 (Upsert)"""

    content_id: int = Field(..., gt=0, description="메인 서버 콘텐츠 ID")
    title: str = Field(..., min_length=1, max_length=500, description="제목")
    content_type: ContentType = Field(..., description="콘텐츠 타입")
    tags: list[str] = Field(default_factory=list, description="태그 목록")
    time_of_day_relevance: Optional[dict[TimeOfDay, float]] = Field(
        None, description="시간대별 적합도 (0~1)"
    )
    published_at: Optional[datetime] = Field(None, description="게시 일시")
    is_active: bool = Field(True, description="활성 여부")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        if len(v) > 50:
            raise ValueError("태그는 최대 50개까지 허용됩니다.")
        # 순서를 유지하면서 공백/중복 제거, 소문자로 저장
        seen: set[str] = set()
        cleaned = []
        for tag in v:
            tag = tag.strip().lower()
            if tag and tag not in seen:
                seen.add(tag)
                cleaned.append(tag)
        return cleaned

    @field_validator("time_of_day_relevance")
    @classmethod
    def validate_relevance(
        cls, v: Optional[dict[TimeOfDay, float]]
    ) -> Optional[dict[TimeOfDay, float]]:
        if v is None:
            return v
        for slot, value in v.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(
                    f"시간대 적합도는 0~1 사이여야 합니다: {slot.value}"
                )
        return v


class ContentListRequest(BaseModel):
    """콘텐츠 목록 조회 필터"""

    content_type: Optional[ContentType] = None
    tags: Optional[list[str]] = None
    include_inactive: bool = False


# Response Schemas


class ContentResponse(BaseModel):
    """콘텐츠 응답"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content_type: ContentType
    tags: list[str]
    time_of_day_relevance: Optional[dict[str, float]] = None
    published_at: Optional[datetime] = None
    is_active: bool
    view_count: int
    like_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None
