"""Recommendations 도메인 예외 정의

추천 엔진 자체(개인화 추천, 행동 기록, 폴백 추천)는 예외를 전파하지
않습니다. 아래 예외는 A/B 테스트 관리 API에서만 사용됩니다.
"""

from enum import Enum
from typing import Any, Optional

from app.core.exceptions import BadRequestException, NotFoundException


class RecommendationErrorCode(str, Enum):
    """추천 도메인 에러 코드"""

    AB_TEST_NOT_FOUND = "AB_TEST_NOT_FOUND"
    INVALID_AB_TEST = "INVALID_AB_TEST"


class ABTestNotFoundException(NotFoundException):
    """A/B 테스트를 찾을 수 없는 경우"""

    def __init__(self, ab_test_id: int | None = None):
        detail = {"ab_test_id": ab_test_id} if ab_test_id else {}
        super().__init__(
            message="A/B 테스트를 찾을 수 없습니다.",
            error_code=RecommendationErrorCode.AB_TEST_NOT_FOUND,
            detail=detail,
        )


class InvalidABTestException(BadRequestException):
    """A/B 테스트 정의가 올바르지 않은 경우

    변형이 2개 미만이거나, 변형 이름이 중복되거나, 실행할 수 없는
    알고리즘을 지정한 경우입니다.
    """

    def __init__(self, reason: str, detail: Optional[dict[str, Any]] = None):
        super().__init__(
            message=f"A/B 테스트 정의가 올바르지 않습니다: {reason}",
            error_code=RecommendationErrorCode.INVALID_AB_TEST,
            detail=detail or {},
        )
