"""Users 도메인 예외 정의"""

from enum import Enum

from app.core.exceptions import NotFoundException


class UserErrorCode(str, Enum):
    """사용자 도메인 에러 코드"""

    USER_PROFILE_NOT_FOUND = "USER_PROFILE_NOT_FOUND"


class UserProfileNotFoundException(NotFoundException):
    """사용자 프로필을 찾을 수 없는 경우"""

    def __init__(self, user_id: int | None = None):
        detail = {"user_id": user_id} if user_id else {}
        super().__init__(
            message="사용자 프로필을 찾을 수 없습니다.",
            error_code=UserErrorCode.USER_PROFILE_NOT_FOUND,
            detail=detail,
        )
