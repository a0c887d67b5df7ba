"""Promotion Service 단위 테스트"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.domains.promotions.exceptions import (
    InvalidPromotionPeriodException,
    PromotionNotFoundException,
)
from app.domains.promotions.models import SeasonalPromotion
from app.domains.promotions.schemas import PromotionCreate, PromotionUpdate
from app.domains.promotions.service import PromotionService

START = datetime(2026, 3, 1, tzinfo=timezone.utc)
END = datetime(2026, 3, 31, tzinfo=timezone.utc)


@pytest.fixture
def mock_session():
    """Mock AsyncSession"""
    return MagicMock()


@pytest.fixture
def promotion_service(mock_session):
    """PromotionService 인스턴스"""
    return PromotionService(mock_session)


@pytest.fixture
def promotion():
    return SeasonalPromotion(
        id=1,
        name="봄 해독 기획전",
        start_date=START,
        end_date=END,
        is_active=True,
        priority=5,
        boosted_tags=["detox"],
        global_boost_factor=1.5,
    )


class TestPromotionServiceCreate:
    """프로모션 생성 테스트"""

    @pytest.mark.asyncio
    async def test_create_success(self, promotion_service):
        """프로모션 생성 성공"""
        # Given
        data = PromotionCreate(
            name="봄 해독 기획전",
            start_date=START,
            end_date=END,
            boosted_tags=["detox", "green tea"],
            regions=["kr"],
        )

        async def _create(promotion):
            promotion.id = 10
            return promotion

        promotion_service.repository.create = AsyncMock(side_effect=_create)

        # When
        with patch("app.domains.promotions.service.logger") as mock_logger:
            result = await promotion_service.create_promotion(data)

        # Then
        assert result.id == 10
        assert result.boosted_tags == ["detox", "green tea"]
        assert result.global_boost_factor == 1.3
        assert result.regions == ["kr"]
        mock_logger.info.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("end_date", [START, START - timedelta(days=1)])
    async def test_create_rejects_invalid_period(
        self, promotion_service, end_date
    ):
        """종료 일시가 시작 일시 이전이거나 같으면 예외"""
        # Given
        data = PromotionCreate(name="잘못된 기간", start_date=START, end_date=end_date)
        promotion_service.repository.create = AsyncMock()

        # When / Then
        with pytest.raises(InvalidPromotionPeriodException):
            await promotion_service.create_promotion(data)
        promotion_service.repository.create.assert_not_called()


class TestPromotionServiceUpdate:
    """프로모션 수정 테스트"""

    @pytest.mark.asyncio
    async def test_partial_update_keeps_unset_fields(
        self, promotion_service, promotion
    ):
        """설정한 필드만 변경"""
        # Given
        promotion_service.repository.get_by_id = AsyncMock(return_value=promotion)
        promotion_service.repository.update = AsyncMock(side_effect=lambda p: p)

        # When
        with patch("app.domains.promotions.service.logger"):
            result = await promotion_service.update_promotion(
                1, PromotionUpdate(priority=9, is_active=False)
            )

        # Then
        assert result.priority == 9
        assert result.is_active is False
        assert result.name == "봄 해독 기획전"
        assert result.boosted_tags == ["detox"]

    @pytest.mark.asyncio
    async def test_update_validates_merged_period(
        self, promotion_service, promotion
    ):
        """기존 시작 일시보다 이른 종료 일시로 수정하면 예외"""
        # Given
        promotion_service.repository.get_by_id = AsyncMock(return_value=promotion)
        promotion_service.repository.update = AsyncMock()

        # When / Then
        with pytest.raises(InvalidPromotionPeriodException):
            await promotion_service.update_promotion(
                1, PromotionUpdate(end_date=START - timedelta(days=3))
            )
        promotion_service.repository.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_not_found(self, promotion_service):
        promotion_service.repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(PromotionNotFoundException):
            await promotion_service.update_promotion(99, PromotionUpdate())


class TestPromotionServiceQuery:
    """프로모션 조회/삭제/클릭 테스트"""

    @pytest.mark.asyncio
    async def test_get_promotions_pagination(self, promotion_service, promotion):
        """page/size → skip/limit"""
        promotion_service.repository.get_list = AsyncMock(return_value=[promotion])
        promotion_service.repository.count = AsyncMock(return_value=41)

        promotions, total = await promotion_service.get_promotions(
            page=3, size=20, active_only=True
        )

        assert promotions == [promotion]
        assert total == 41
        promotion_service.repository.get_list.assert_called_once_with(
            skip=40, limit=20, active_only=True
        )
        promotion_service.repository.count.assert_called_once_with(
            active_only=True
        )

    @pytest.mark.asyncio
    async def test_delete_promotion(self, promotion_service, promotion):
        promotion_service.repository.get_by_id = AsyncMock(return_value=promotion)
        promotion_service.repository.delete = AsyncMock()

        with patch("app.domains.promotions.service.logger"):
            await promotion_service.delete_promotion(1)

        promotion_service.repository.delete.assert_called_once_with(promotion)

    @pytest.mark.asyncio
    async def test_track_click(self, promotion_service, promotion):
        """존재하는 프로모션의 클릭 수 증가"""
        promotion_service.repository.get_by_id = AsyncMock(return_value=promotion)
        promotion_service.repository.increment_clicks = AsyncMock()

        await promotion_service.track_click(1)

        promotion_service.repository.increment_clicks.assert_called_once_with(1)

    @pytest.mark.asyncio
    async def test_track_click_not_found(self, promotion_service):
        """없는 프로모션 클릭은 예외, 집계하지 않음"""
        promotion_service.repository.get_by_id = AsyncMock(return_value=None)
        promotion_service.repository.increment_clicks = AsyncMock()

        with pytest.raises(PromotionNotFoundException):
            await promotion_service.track_click(99)
        promotion_service.repository.increment_clicks.assert_not_called()


class TestPromotionSchemas:
    """프로모션 스키마 검증 테스트"""

    def test_boosted_tags_are_lower_cased(self):
        """부스트 태그는 콘텐츠 태그와 같이 소문자로 저장"""
        now = datetime.now(timezone.utc)

        data = PromotionCreate(
            name="봄 해독",
            start_date=now,
            end_date=now + timedelta(days=7),
            boosted_tags=["Detox", " detox ", "Green Tea"],
        )

        assert data.boosted_tags == ["detox", "green tea"]

    def test_update_keeps_unset_boosted_tags(self):
        assert PromotionUpdate(priority=5).boosted_tags is None
        assert PromotionUpdate(boosted_tags=["Tea"]).boosted_tags == ["tea"]
