"""Contents API 통합 테스트"""

import pytest

pytestmark = pytest.mark.integration


def _content_payload(content_id: int, **overrides) -> dict:
    payload = {
        "content_id": content_id,
        "title": "봄철 간 해독 녹차",
        "content_type": "article",
        "tags": ["spring", "detox", "green tea"],
        "time_of_day_relevance": {"morning": 0.9},
        "published_at": "2026-03-01T09:00:00Z",
    }
    payload.update(overrides)
    return payload


class TestAuthenticationRequired:
    """API Key 인증 필수 테스트"""

    @pytest.mark.asyncio
    async def test_sync_missing_api_key(self, client):
        """API Key 없이 콘텐츠 동기화 요청"""
        response = await client.post(
            "/api/v1/contents", json=_content_payload(1)
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_contents_invalid_api_key(self, client):
        """잘못된 API Key로 콘텐츠 목록 조회"""
        headers = {"X-Internal-Api-Key": "invalid-key"}
        response = await client.get("/api/v1/contents", headers=headers)
        assert response.status_code == 401


class TestContentSyncAPI:
    """콘텐츠 동기화 API 테스트"""

    @pytest.mark.asyncio
    async def test_sync_content_success(
        self, client, api_key_header, user_id_factory
    ):
        """콘텐츠 동기화 성공"""
        # Given
        content_id = user_id_factory()

        # When
        response = await client.post(
            "/api/v1/contents",
            json=_content_payload(content_id),
            headers=api_key_header,
        )

        # Then
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] == content_id
        assert data["tags"] == ["spring", "detox", "green tea"]
        assert data["time_of_day_relevance"] == {"morning": 0.9}
        assert data["view_count"] == 0
        assert data["is_active"] is True

    @pytest.mark.asyncio
    async def test_resync_updates_metadata(
        self, client, api_key_header, user_id_factory
    ):
        """같은 ID로 다시 동기화하면 메타데이터 갱신"""
        # Given
        content_id = user_id_factory()
        await client.post(
            "/api/v1/contents",
            json=_content_payload(content_id),
            headers=api_key_header,
        )

        # When
        response = await client.post(
            "/api/v1/contents",
            json=_content_payload(
                content_id, title="가을 폐 보양 배숙", tags=["autumn"]
            ),
            headers=api_key_header,
        )

        # Then
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "가을 폐 보양 배숙"
        assert data["tags"] == ["autumn"]

    @pytest.mark.asyncio
    async def test_sync_rejects_unknown_content_type(
        self, client, api_key_header
    ):
        response = await client.post(
            "/api/v1/contents",
            json=_content_payload(1, content_type="livestream"),
            headers=api_key_header,
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_sync_rejects_out_of_range_relevance(
        self, client, api_key_header
    ):
        """시간대 적합도가 1을 넘으면 422"""
        response = await client.post(
            "/api/v1/contents",
            json=_content_payload(1, time_of_day_relevance={"night": 1.2}),
            headers=api_key_header,
        )
        assert response.status_code == 422


class TestContentQueryAPI:
    """콘텐츠 조회/비활성화 API 테스트"""

    @pytest.mark.asyncio
    async def test_get_content_not_found(self, client, api_key_header):
        response = await client.get(
            "/api/v1/contents/999999", headers=api_key_header
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CONTENT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_list_filters_by_type_and_tag(
        self, client, api_key_header, user_id_factory
    ):
        """타입/태그 필터 및 페이지네이션 메타"""
        # Given
        article_id, video_id, other_id = user_id_factory(3)
        for payload in (
            _content_payload(article_id),
            _content_payload(video_id, content_type="video"),
            _content_payload(other_id, tags=["winter"]),
        ):
            await client.post(
                "/api/v1/contents", json=payload, headers=api_key_header
            )

        # When
        response = await client.get(
            "/api/v1/contents?content_type=article&tags=detox&page=1&size=10",
            headers=api_key_header,
        )

        # Then
        assert response.status_code == 200
        body = response.json()
        assert [c["id"] for c in body["data"]] == [article_id]
        assert body["meta"]["total"] == 1
        assert body["meta"]["size"] == 10

    @pytest.mark.asyncio
    async def test_deactivate_hides_from_default_list(
        self, client, api_key_header, user_id_factory
    ):
        """비활성화된 콘텐츠는 기본 목록에서 제외"""
        # Given
        content_id = user_id_factory()
        await client.post(
            "/api/v1/contents",
            json=_content_payload(content_id),
            headers=api_key_header,
        )

        # When
        delete_response = await client.delete(
            f"/api/v1/contents/{content_id}", headers=api_key_header
        )
        active = await client.get("/api/v1/contents", headers=api_key_header)
        everything = await client.get(
            "/api/v1/contents?include_inactive=true", headers=api_key_header
        )

        # Then
        assert delete_response.status_code == 200
        assert delete_response.json()["data"]["is_active"] is False
        assert content_id not in [c["id"] for c in active.json()["data"]]
        assert content_id in [c["id"] for c in everything.json()["data"]]
