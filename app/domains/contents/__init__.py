"""Contents 도메인 모듈

추천 대상 콘텐츠 메타데이터를 관리하는 도메인입니다.

구조:
    - models.py: SQLAlchemy 모델 정의 (ContentItem, ContentType, TimeOfDay)
    - schemas.py: Pydantic 스키마 (Request/Response)
    - repository.py: 데이터 접근 계층 (후보 조회, 인기순, 카운터)
    - service.py: 비즈니스 로직 (Sync, 조회, 비활성화)
    - router.py: API 엔드포인트 (API Key 인증 포함)
    - exceptions.py: 도메인 예외
"""

from app.domains.contents.exceptions import (
    ContentErrorCode,
    ContentNotFoundException,
)
from app.domains.contents.models import ContentItem, ContentType, TimeOfDay

__all__ = [
    "ContentItem",
    "ContentType",
    "TimeOfDay",
    "ContentErrorCode",
    "ContentNotFoundException",
]
