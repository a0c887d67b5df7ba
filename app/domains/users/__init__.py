"""Users 도메인 모듈

메인 서버와의 사용자 건강 프로필 동기화를 위한 도메인입니다.

구조:
    - models.py: SQLAlchemy 모델 정의 (UserProfile)
    - schemas.py: Pydantic 스키마 (UserProfileSync, UserProfileResponse)
    - repository.py: 데이터 접근 계층
    - service.py: 비즈니스 로직 (동기화, Upsert)
    - router.py: API 엔드포인트 (API Key 인증 포함)
    - exceptions.py: 도메인 예외
"""

from app.domains.users.exceptions import (
    UserErrorCode,
    UserProfileNotFoundException,
)
from app.domains.users.models import UserProfile
from app.domains.users.router import router
from app.domains.users.schemas import UserProfileResponse, UserProfileSync
from app.domains.users.service import UserProfileService

__all__ = [
    "UserProfile",
    "UserProfileService",
    "UserProfileSync",
    "UserProfileResponse",
    "router",
    "UserErrorCode",
    "UserProfileNotFoundException",
]
