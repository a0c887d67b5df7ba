"""Recommendations 도메인 모듈

개인화 추천 엔진입니다.

구조:
    - service.py: 오케스트레이터 (알고리즘 선택 → 점수 → 블렌딩 → 다양성 → 시즌 부스트)
    - feedback/: 행동 기록 기반 가중치 학습, 알고리즘 성과 분석
    - scoring/: 콘텐츠 기반 / 협업 필터링 점수, 사용자 유사도
    - ranking/: 하이브리드 블렌딩, 다양성 필터
    - seasonal/: TCM 절기 달력, 시즌 프로모션 부스트
    - ab_testing.py: A/B 테스트 배정 및 결과 집계
    - store.py: 리포지토리 묶음과 저장소 팩토리
    - tuning.py: 튜닝 파라미터
"""

from app.domains.recommendations.exceptions import (
    ABTestNotFoundException,
    InvalidABTestException,
    RecommendationErrorCode,
)
from app.domains.recommendations.models import ABTest, RecommendationLog
from app.domains.recommendations.types import (
    PersonalizedWeights,
    RecommendationAlgorithm,
    RecommendationOptions,
    ScoredContent,
)

__all__ = [
    "ABTest",
    "RecommendationLog",
    "PersonalizedWeights",
    "RecommendationAlgorithm",
    "RecommendationOptions",
    "ScoredContent",
    "RecommendationErrorCode",
    "ABTestNotFoundException",
    "InvalidABTestException",
]
