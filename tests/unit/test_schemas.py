"""스키마 단위 테스트"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.core.schemas import (
    APIResponse,
    ErrorDetail,
    ErrorResponse,
    create_list_response,
    create_response,
)
from app.domains.behaviors.models import InteractionAction
from app.domains.contents.models import ContentItem, ContentType
from app.domains.recommendations.schemas import (
    InteractionCreate,
    RecommendationItem,
)
from app.domains.recommendations.types import (
    PromotionProvenance,
    RecommendationAlgorithm,
    ScoredContent,
)


class TestAPIResponse:
    """APIResponse 테스트"""

    def test_create_response_with_data(self):
        """데이터가 있는 성공 응답"""
        response = create_response(
            data={"tracked": True}, message="행동 기록 성공"
        )

        assert response.success is True
        assert response.message == "행동 기록 성공"
        assert response.data == {"tracked": True}

    def test_default_message(self):
        """기본 메시지, 데이터 없음"""
        response = APIResponse(success=True)

        assert response.message == "요청이 성공적으로 처리되었습니다."
        assert response.data is None


class TestListAPIResponse:
    """create_list_response 페이지네이션 메타 테스트"""

    @pytest.mark.parametrize(
        "total,page,size,total_pages,has_next,has_prev",
        [
            (100, 2, 20, 5, True, True),
            (50, 1, 20, 3, True, False),
            (50, 3, 20, 3, False, True),
            (0, 1, 20, 0, False, False),
        ],
    )
    def test_page_meta(
        self, total, page, size, total_pages, has_next, has_prev
    ):
        response = create_list_response(
            data=[], total=total, page=page, size=size
        )

        assert response.meta.total == total
        assert response.meta.total_pages == total_pages
        assert response.meta.has_next is has_next
        assert response.meta.has_prev is has_prev


class TestErrorResponse:
    """ErrorResponse 테스트"""

    def test_error_response_structure(self):
        """에러 응답 구조 검증"""
        error = ErrorResponse(
            message="콘텐츠를 찾을 수 없습니다.",
            error=ErrorDetail(
                code="CONTENT_NOT_FOUND",
                message="콘텐츠를 찾을 수 없습니다.",
                detail={"content_id": 123},
            ),
        )

        assert error.success is False
        assert error.error.code == "CONTENT_NOT_FOUND"
        assert error.error.detail == {"content_id": 123}


class TestInteractionCreate:
    """행동 기록 요청 스키마 테스트"""

    def test_valid_request(self):
        request = InteractionCreate(
            content_id=1, action="like", completion_rate=0.5
        )

        assert request.action == InteractionAction.LIKE
        assert request.metadata == {}

    def test_unknown_action_rejected(self):
        """알 수 없는 행동은 거부"""
        with pytest.raises(ValidationError):
            InteractionCreate(content_id=1, action="poke")

    def test_completion_rate_range(self):
        """완료율은 0~1"""
        with pytest.raises(ValidationError):
            InteractionCreate(content_id=1, action="view", completion_rate=1.5)


class TestRecommendationItem:
    """추천 항목 변환 테스트"""

    def test_from_scored_with_promotion(self):
        """ScoredContent → 응답 (프로모션 출처 포함)"""
        # Given
        content = ContentItem(
            id=1,
            title="봄 녹차",
            content_type=ContentType.ARTICLE,
            tags=["green tea"],
            is_active=True,
            view_count=3,
            like_count=1,
            created_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
        )
        scored = ScoredContent(
            content=content,
            score=2.0,
            algorithm=RecommendationAlgorithm.HYBRID,
            promotion=PromotionProvenance(
                id=5, name="봄 프로모션", boost=2.0, matched_tags=["green tea"]
            ),
        )

        # When
        item = RecommendationItem.from_scored(scored)

        # Then
        assert item.content.id == 1
        assert item.algorithm == "hybrid"
        assert item.promotion.id == 5
        assert item.promotion.matched_tags == ["green tea"]
        assert item.promotion.matched_type is None
        assert item.seasonal_suggestion is False
