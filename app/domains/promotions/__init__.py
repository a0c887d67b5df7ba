"""Promotions 도메인 모듈

운영자가 관리하는 시즌 프로모션 도메인입니다.
추천 엔진의 시즌 부스트 단계가 활성 프로모션을 읽어 점수를 조정합니다.
"""

from app.domains.promotions.exceptions import (
    InvalidPromotionPeriodException,
    PromotionErrorCode,
    PromotionNotFoundException,
)
from app.domains.promotions.models import GLOBAL_REGION, SeasonalPromotion

__all__ = [
    "SeasonalPromotion",
    "GLOBAL_REGION",
    "PromotionErrorCode",
    "PromotionNotFoundException",
    "InvalidPromotionPeriodException",
]
