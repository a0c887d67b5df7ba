"""공통 API 응답 스키마

모든 엔드포인트는 success/message/data(/meta) 구조로 응답합니다.

Usage::

    # 단일 데이터 응답
    return create_response(data=items, message="추천 목록을 조회했습니다.")

    # 목록 데이터 응답 (페이지네이션)
    return create_list_response(data=promotions, total=41, page=3, size=20)

Note:
    Generic 모델은 classmethod 팩토리를 정의하기 까다로우므로
    create_response / create_list_response 함수를 사용합니다.
"""

import math
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")

DEFAULT_SUCCESS_MESSAGE = "요청이 성공적으로 처리되었습니다."


class APIResponse(BaseModel, Generic[DataT]):
    """단일 데이터 API 응답

    Example::

        @router.get("/{promotion_id}", response_model=APIResponse[PromotionResponse])
        async def get_promotion(promotion_id: int, service=Depends(...)):
            promotion = await service.get_promotion(promotion_id)
            return create_response(
                data=PromotionResponse.model_validate(promotion),
                message="프로모션 정보를 조회했습니다.",
            )
    """

    success: bool = True
    message: str = DEFAULT_SUCCESS_MESSAGE
    data: Optional[DataT] = None


class PageMeta(BaseModel):
    """페이지네이션 메타 정보"""

    total: int = Field(..., description="전체 아이템 수")
    page: int = Field(..., description="현재 페이지")
    size: int = Field(..., description="페이지 크기")
    total_pages: int = Field(..., description="전체 페이지 수")
    has_next: bool = Field(..., description="다음 페이지 존재 여부")
    has_prev: bool = Field(..., description="이전 페이지 존재 여부")


class ListAPIResponse(BaseModel, Generic[DataT]):
    """목록 데이터 API 응답 (콘텐츠, 프로모션, A/B 테스트 목록)"""

    success: bool = True
    message: str = DEFAULT_SUCCESS_MESSAGE
    data: list[DataT] = Field(default_factory=list)
    meta: PageMeta


def create_response(
    data: Optional[DataT] = None,
    message: str = DEFAULT_SUCCESS_MESSAGE,
    success: bool = True,
) -> APIResponse[DataT]:
    """API 응답 생성

    Args:
        data: 응답 데이터
        message: 응답 메시지
        success: 성공 여부
    """
    return APIResponse(success=success, message=message, data=data)


def create_list_response(
    data: list[DataT],
    total: int,
    page: int,
    size: int,
    message: str = DEFAULT_SUCCESS_MESSAGE,
) -> ListAPIResponse[DataT]:
    """목록 API 응답 생성 (페이지 메타 계산 포함)

    Args:
        data: 현재 페이지 데이터
        total: 전체 아이템 수
        page: 현재 페이지 (1부터 시작)
        size: 페이지 크기
        message: 응답 메시지
    """
    total_pages = math.ceil(total / size) if size > 0 else 0
    return ListAPIResponse(
        success=True,
        message=message,
        data=data,
        meta=PageMeta(
            total=total,
            page=page,
            size=size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


class ErrorDetail(BaseModel):
    """에러 상세 정보"""

    code: str = Field(..., description="에러 코드")
    message: str = Field(..., description="에러 메시지")
    detail: Optional[dict[str, Any]] = Field(default=None, description="추가 정보")


class ErrorResponse(BaseModel):
    """에러 API 응답

    Example::

        {
            "success": false,
            "message": "A/B 테스트를 찾을 수 없습니다.",
            "error": {
                "code": "AB_TEST_NOT_FOUND",
                "message": "A/B 테스트를 찾을 수 없습니다.",
                "detail": {"ab_test_id": 9}
            }
        }
    """

    success: bool = False
    message: str
    error: ErrorDetail
