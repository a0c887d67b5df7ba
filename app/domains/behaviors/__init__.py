"""Behaviors 도메인 모듈

사용자 행동 기록(InteractionEvent)과 태그 관심도(UserInterestScore)를
저장합니다. 기록은 추천 엔진의 TrackInteraction을 통해서만 추가됩니다.
"""

from app.domains.behaviors.models import (
    POSITIVE_INTEREST_ACTIONS,
    InteractionAction,
    InteractionEvent,
    UserInterestScore,
)

__all__ = [
    "InteractionAction",
    "InteractionEvent",
    "UserInterestScore",
    "POSITIVE_INTEREST_ACTIONS",
]
