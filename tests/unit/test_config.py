"""Config 설정 검증 테스트"""

import pytest
from pydantic import ValidationError

from app.core.config import Settings


class TestDevelopmentConfig:
    """개발 환경 설정 테스트"""

    def test_development_allows_default_keys(self):
        """개발 환경에서는 기본 키 허용"""
        config = Settings(
            app_env="development",
            internal_api_key="your-internal-api-key-here",
        )
        assert config.is_development
        assert config.internal_api_key == "your-internal-api-key-here"

    def test_recommendation_defaults(self):
        """추천 엔진 기본 설정"""
        config = Settings(app_env="development")

        assert config.recommendation_fetch_timeout_seconds == 3.0
        assert config.recommendation_default_limit == 20
        assert config.recommendation_max_limit == 100
        assert config.seasonal_auto_promotion_enabled is False

    def test_cors_origins_from_comma_separated_string(self):
        """쉼표 구분 문자열도 CORS origin 목록으로 파싱"""
        config = Settings(cors_origins="http://a.com, http://b.com")

        assert config.cors_origins == ["http://a.com", "http://b.com"]


class TestRecommendationConfig:
    """추천 엔진 설정 검증 테스트"""

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_rejects_non_positive_fetch_timeout(self, timeout):
        """조회 타임아웃은 양수여야 함"""
        with pytest.raises(ValidationError) as exc_info:
            Settings(recommendation_fetch_timeout_seconds=timeout)

        assert "RECOMMENDATION_FETCH_TIMEOUT_SECONDS" in str(exc_info.value)

    def test_rejects_default_limit_above_max(self):
        """기본 추천 수가 최대 추천 수를 넘으면 거부"""
        with pytest.raises(ValidationError) as exc_info:
            Settings(
                recommendation_default_limit=50,
                recommendation_max_limit=10,
            )

        assert "RECOMMENDATION_DEFAULT_LIMIT" in str(exc_info.value)


class TestProductionConfig:
    """프로덕션 환경 설정 검증 테스트"""

    def test_production_rejects_default_internal_api_key(self):
        """프로덕션에서 기본 Internal API Key 거부"""
        with pytest.raises(ValidationError) as exc_info:
            Settings(
                app_env="production",
                internal_api_key="your-internal-api-key-here",
            )

        assert "INTERNAL_API_KEY" in str(exc_info.value)

    def test_production_rejects_short_internal_api_key(self):
        """프로덕션에서 짧은 Internal API Key 거부"""
        with pytest.raises(ValidationError) as exc_info:
            Settings(
                app_env="production",
                internal_api_key="short-key",
            )

        assert "32 characters" in str(exc_info.value)

    def test_production_accepts_valid_keys(self):
        """프로덕션에서 유효한 키 허용"""
        config = Settings(
            app_env="production",
            internal_api_key=(
                "valid-internal-api-key-with-32-characters-minimum"
            ),
        )
        assert config.is_production
        assert len(config.internal_api_key) >= 32
