"""Content Service 단위 테스트"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from app.domains.contents.exceptions import ContentNotFoundException
from app.domains.contents.models import ContentItem, ContentType, TimeOfDay
from app.domains.contents.schemas import ContentListRequest, ContentSyncRequest
from app.domains.contents.service import ContentService


@pytest.fixture
def mock_session():
    """Mock AsyncSession"""
    return MagicMock()


@pytest.fixture
def content_service(mock_session):
    """ContentService 인스턴스"""
    return ContentService(mock_session)


def _content(**overrides) -> ContentItem:
    fields = dict(
        id=1,
        title="봄철 간 해독 차",
        content_type=ContentType.ARTICLE,
        tags=["spring", "detox"],
        is_active=True,
        view_count=42,
        like_count=7,
    )
    fields.update(overrides)
    return ContentItem(**fields)


class TestContentServiceSync:
    """콘텐츠 동기화 테스트"""

    @pytest.mark.asyncio
    async def test_sync_creates_new_content(self, content_service):
        """새 콘텐츠 생성 (카운터 0으로 시작)"""
        # Given
        data = ContentSyncRequest(
            content_id=1,
            title="봄철 간 해독 차",
            content_type=ContentType.ARTICLE,
            tags=["spring", " detox ", "spring"],
            time_of_day_relevance={TimeOfDay.MORNING: 0.8},
        )
        content_service.repository.get_by_id = AsyncMock(return_value=None)
        content_service.repository.create = AsyncMock(
            side_effect=lambda content: content
        )

        # When
        with patch("app.domains.contents.service.logger"):
            result = await content_service.sync_content(data)

        # Then
        assert result.id == 1
        assert result.tags == ["spring", "detox"]
        assert result.time_of_day_relevance == {"morning": 0.8}
        assert result.view_count == 0
        assert result.like_count == 0

    @pytest.mark.asyncio
    async def test_sync_updates_metadata_and_keeps_counters(
        self, content_service
    ):
        """기존 콘텐츠는 메타데이터만 갱신"""
        # Given
        existing = _content()
        published = datetime(2026, 3, 1, tzinfo=timezone.utc)
        data = ContentSyncRequest(
            content_id=1,
            title="새 제목",
            content_type=ContentType.RECIPE,
            tags=["tea"],
            published_at=published,
            is_active=False,
        )
        content_service.repository.get_by_id = AsyncMock(return_value=existing)
        content_service.repository.update = AsyncMock(
            side_effect=lambda content: content
        )

        # When
        with patch("app.domains.contents.service.logger"):
            result = await content_service.sync_content(data)

        # Then
        assert result.title == "새 제목"
        assert result.content_type == ContentType.RECIPE
        assert result.tags == ["tea"]
        assert result.published_at == published
        assert result.is_active is False
        assert result.view_count == 42
        assert result.like_count == 7


class TestContentServiceQuery:
    """콘텐츠 조회 테스트"""

    @pytest.mark.asyncio
    async def test_get_content_not_found(self, content_service):
        content_service.repository.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(ContentNotFoundException):
            await content_service.get_content(999)

    @pytest.mark.asyncio
    async def test_get_contents_builds_filters(self, content_service):
        """목록 필터 → 리포지토리 필터, page/size → skip/limit"""
        # Given
        content_service.repository.find = AsyncMock(return_value=[_content()])
        content_service.repository.count = AsyncMock(return_value=31)

        # When
        contents, total = await content_service.get_contents(
            ContentListRequest(content_type=ContentType.VIDEO, tags=["yoga"]),
            page=3,
            size=10,
        )

        # Then
        assert len(contents) == 1
        assert total == 31
        args, kwargs = content_service.repository.find.call_args
        filters = args[0]
        assert filters.content_type == ContentType.VIDEO
        assert filters.any_tags == ["yoga"]
        assert filters.active_only is True
        assert kwargs == {"skip": 20, "limit": 10}

    @pytest.mark.asyncio
    async def test_get_contents_include_inactive(self, content_service):
        content_service.repository.find = AsyncMock(return_value=[])
        content_service.repository.count = AsyncMock(return_value=0)

        await content_service.get_contents(
            ContentListRequest(include_inactive=True)
        )

        filters = content_service.repository.find.call_args.args[0]
        assert filters.active_only is False

    @pytest.mark.asyncio
    async def test_deactivate_content(self, content_service):
        """비활성화 후 저장"""
        content = _content()
        content_service.repository.get_by_id = AsyncMock(return_value=content)
        content_service.repository.update = AsyncMock(
            side_effect=lambda c: c
        )

        with patch("app.domains.contents.service.logger"):
            result = await content_service.deactivate_content(1)

        assert result.is_active is False


class TestContentSyncRequest:
    """콘텐츠 동기화 스키마 검증 테스트"""

    def test_rejects_out_of_range_relevance(self):
        """시간대 적합도는 0~1"""
        with pytest.raises(ValidationError):
            ContentSyncRequest(
                content_id=1,
                title="t",
                content_type=ContentType.ARTICLE,
                time_of_day_relevance={TimeOfDay.NIGHT: 1.5},
            )

    def test_rejects_too_many_tags(self):
        """태그는 최대 50개"""
        with pytest.raises(ValidationError):
            ContentSyncRequest(
                content_id=1,
                title="t",
                content_type=ContentType.ARTICLE,
                tags=[f"tag-{i}" for i in range(51)],
            )

    def test_tags_are_lower_cased(self):
        """태그는 소문자로 저장 (대소문자만 다른 중복 제거)"""
        data = ContentSyncRequest(
            content_id=1,
            title="t",
            content_type=ContentType.ARTICLE,
            tags=["Wellness", "wellness", "Spring"],
        )

        assert data.tags == ["wellness", "spring"]


@pytest.mark.parametrize(
    "hour,slot",
    [
        (5, TimeOfDay.MORNING),
        (11, TimeOfDay.MORNING),
        (12, TimeOfDay.AFTERNOON),
        (18, TimeOfDay.EVENING),
        (23, TimeOfDay.NIGHT),
        (3, TimeOfDay.NIGHT),
    ],
)
def test_time_of_day_from_hour(hour, slot):
    """시간 → 시간대 매핑"""
    assert TimeOfDay.from_hour(hour) == slot


def test_content_type_parse():
    """'all' 또는 빈 값은 전체(None)"""
    assert ContentType.parse("all") is None
    assert ContentType.parse(None) is None
    assert ContentType.parse("video") == ContentType.VIDEO
