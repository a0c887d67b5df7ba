"""사용자 유사도 인덱스

행동 기록의 콘텐츠 집합 교집합을 이용해 유사 사용자를 찾습니다.
`SimilarityIndex` 프로토콜을 구현하면 사전 계산된 인덱스 등으로
교체할 수 있습니다.
"""

from collections import Counter
from typing import AbstractSet, Protocol

from app.domains.recommendations.store import RecommendationStore
from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning
from app.domains.recommendations.types import SimilarUser


def jaccard_similarity(a: AbstractSet, b: AbstractSet) -> float:
    """자카드 유사도 |A ∩ B| / |A ∪ B| (빈 집합이면 0)"""
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


class SimilarityIndex(Protocol):
    """유사 사용자 조회 인터페이스"""

    async def find_similar_users(
        self, store: RecommendationStore, user_id: int
    ) -> list[SimilarUser]:
        ...


class BehaviorSimilarityIndex:
    """행동 기록 기반 유사도 인덱스

    1. 대상 사용자의 최근 행동 100건에서 콘텐츠 집합 추출
    2. 해당 콘텐츠를 이용한 다른 사용자 중 3개 이상 겹치는 사용자 선별
    3. 전체 콘텐츠 집합 기준 자카드 유사도 계산 (0.1 초과, 상위 50명)
    """

    def __init__(self, tuning: RecommendationTuning = DEFAULT_TUNING):
        self.tuning = tuning

    def rank_neighbors(
        self,
        user_content_ids: AbstractSet[int],
        candidate_sets: dict[int, set[int]],
    ) -> list[SimilarUser]:
        """후보 사용자별 유사도 계산 후 정렬

        Args:
            user_content_ids: 대상 사용자의 콘텐츠 집합
            candidate_sets: 후보 사용자 ID → 콘텐츠 집합

        Returns:
            유사도 내림차순 유사 사용자 목록
        """
        neighbors = []
        for other_id, other_ids in candidate_sets.items():
            similarity = jaccard_similarity(user_content_ids, other_ids)
            if similarity > self.tuning.min_similarity:
                neighbors.append(
                    SimilarUser(
                        user_id=other_id,
                        similarity=similarity,
                        common_interactions=len(user_content_ids & other_ids),
                    )
                )

        neighbors.sort(key=lambda n: (-n.similarity, n.user_id))
        return neighbors[: self.tuning.max_neighbors]

    async def find_similar_users(
        self, store: RecommendationStore, user_id: int
    ) -> list[SimilarUser]:
        """유사 사용자 조회 (행동이 5건 미만이면 빈 목록)"""
        recent = await store.behaviors.get_recent_by_user(
            user_id, limit=self.tuning.similarity_history_limit
        )
        if len(recent) < self.tuning.min_events_for_similarity:
            return []

        user_content_ids = {e.content_id for e in recent}
        pairs = await store.behaviors.get_user_content_pairs(
            user_content_ids, exclude_user_id=user_id
        )
        overlap = Counter(other_id for other_id, _ in pairs)
        candidates = [
            other_id
            for other_id, count in overlap.items()
            if count >= self.tuning.min_overlap
        ]
        if not candidates:
            return []

        candidate_sets = await store.behaviors.get_content_sets(candidates)
        return self.rank_neighbors(user_content_ids, candidate_sets)
