"""Contents 도메인 예외 정의"""

from enum import Enum

from app.core.exceptions import NotFoundException


class ContentErrorCode(str, Enum):
    """콘텐츠 도메인 에러 코드"""

    CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"


class ContentNotFoundException(NotFoundException):
    """콘텐츠를 찾을 수 없는 경우"""

    def __init__(self, content_id: int | None = None):
        detail = {"content_id": content_id} if content_id else {}
        super().__init__(
            message="콘텐츠를 찾을 수 없습니다.",
            error_code=ContentErrorCode.CONTENT_NOT_FOUND,
            detail=detail,
        )
