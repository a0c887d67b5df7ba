"""하이브리드 블렌딩

콘텐츠 기반 목록과 협업 필터링 목록을 하나의 순위로 합칩니다.
양쪽에 모두 있는 콘텐츠는 가중 평균 후 동시 출현 보너스(×1.2)를 받습니다.
"""

from typing import Sequence

from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning
from app.domains.recommendations.types import (
    RecommendationAlgorithm,
    ScoredContent,
)


def blend(
    content_based: Sequence[ScoredContent],
    collaborative: Sequence[ScoredContent],
    limit: int,
    content_weight: float = 0.4,
    tuning: RecommendationTuning = DEFAULT_TUNING,
) -> list[ScoredContent]:
    """두 추천 목록 블렌딩

    한쪽 목록이 비어 있으면 다른 쪽 목록을 그대로 사용합니다.

    Args:
        content_based: 콘텐츠 기반 추천 (점수 포함)
        collaborative: 협업 필터링 추천 (점수 포함)
        limit: 최대 결과 수
        content_weight: 콘텐츠 기반 점수 비중 (personalized_weight)
        tuning: 튜닝 파라미터

    Returns:
        중복 없는 점수 내림차순 목록
    """
    if not collaborative:
        return _dedupe(content_based)[:limit]
    if not content_based:
        return _dedupe(collaborative)[:limit]

    cb_map = {item.content_id: item for item in reversed(content_based)}
    cf_map = {item.content_id: item for item in reversed(collaborative)}

    ordered_ids = list(
        dict.fromkeys(
            [item.content_id for item in content_based]
            + [item.content_id for item in collaborative]
        )
    )

    blended = []
    for content_id in ordered_ids:
        cb = cb_map.get(content_id)
        cf = cf_map.get(content_id)
        if cb is not None and cf is not None:
            score = (
                content_weight * cb.score + (1 - content_weight) * cf.score
            ) * tuning.co_occurrence_bonus
            blended.append(
                cb.with_score(score, algorithm=RecommendationAlgorithm.HYBRID)
            )
        elif cb is not None:
            blended.append(cb.with_score(cb.score))
        elif cf is not None:
            blended.append(cf.with_score(cf.score))

    # 동점이면 콘텐츠 기반 목록 순서 유지
    blended.sort(key=lambda s: s.score, reverse=True)
    return blended[:limit]


def _dedupe(items: Sequence[ScoredContent]) -> list[ScoredContent]:
    seen: set[int] = set()
    unique = []
    for item in items:
        if item.content_id in seen:
            continue
        seen.add(item.content_id)
        unique.append(item)
    return unique
