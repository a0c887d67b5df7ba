"""Promotions 도메인 예외 정의"""

from enum import Enum

from app.core.exceptions import BadRequestException, NotFoundException


class PromotionErrorCode(str, Enum):
    """프로모션 도메인 에러 코드"""

    PROMOTION_NOT_FOUND = "PROMOTION_NOT_FOUND"
    INVALID_PROMOTION_PERIOD = "INVALID_PROMOTION_PERIOD"


class PromotionNotFoundException(NotFoundException):
    """프로모션을 찾을 수 없는 경우"""

    def __init__(self, promotion_id: int | None = None):
        detail = {"promotion_id": promotion_id} if promotion_id else {}
        super().__init__(
            message="프로모션을 찾을 수 없습니다.",
            error_code=PromotionErrorCode.PROMOTION_NOT_FOUND,
            detail=detail,
        )


class InvalidPromotionPeriodException(BadRequestException):
    """종료 일시가 시작 일시보다 빠른 경우"""

    def __init__(
        self, start_date: str | None = None, end_date: str | None = None
    ):
        detail = {}
        if start_date:
            detail["start_date"] = start_date
        if end_date:
            detail["end_date"] = end_date
        super().__init__(
            message="프로모션 종료 일시는 시작 일시 이후여야 합니다.",
            error_code=PromotionErrorCode.INVALID_PROMOTION_PERIOD,
            detail=detail,
        )
