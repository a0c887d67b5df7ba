"""다양성 필터

대표 태그(첫 번째 태그)별로 그룹을 만들고 그룹당 최대 3개까지만
남긴 뒤, 그룹을 번갈아 가며 하나씩 꺼내 최종 순서를 만듭니다.
태그가 없는 콘텐츠는 각각 독립된 그룹으로 취급합니다.
"""

from typing import Hashable, Sequence

from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning
from app.domains.recommendations.types import ScoredContent


def ensure_diversity(
    items: Sequence[ScoredContent],
    limit: int,
    diversity_weight: float,
    tuning: RecommendationTuning = DEFAULT_TUNING,
) -> list[ScoredContent]:
    """대표 태그 그룹 간 라운드 로빈으로 재정렬

    Args:
        items: 점수순 추천 목록
        limit: 최대 결과 수
        diversity_weight: 다양성 가중치 (0 이하이면 필터 생략)
        tuning: 튜닝 파라미터

    Returns:
        다양성이 보장된 추천 목록
    """
    if diversity_weight <= 0:
        return list(items[:limit])

    cap = tuning.max_items_per_tag_group
    groups: dict[Hashable, list[ScoredContent]] = {}
    for item in items:
        primary = item.content.primary_tag
        key: Hashable = (
            primary if primary is not None else ("untagged", item.content_id)
        )
        group = groups.setdefault(key, [])
        if len(group) < cap:
            group.append(item)

    queues = list(groups.values())
    result: list[ScoredContent] = []
    depth = 0
    while len(result) < limit:
        added = False
        for queue in queues:
            if depth < len(queue):
                result.append(queue[depth])
                added = True
                if len(result) >= limit:
                    break
        if not added:
            break
        depth += 1

    return result
