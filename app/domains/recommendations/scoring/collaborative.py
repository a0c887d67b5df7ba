"""협업 필터링 점수 계산

유사 사용자의 긍정 행동(like/save/share)을 유사도로 가중한 투표로
집계합니다. 점수는 최고 득표 콘텐츠가 1.0이 되도록 정규화하여 콘텐츠
기반 점수와 같은 척도에서 블렌딩됩니다.
"""

from collections import defaultdict
from datetime import datetime
from typing import Optional, Sequence

from app.core.utils.datetime import now_utc
from app.domains.behaviors.models import InteractionAction, InteractionEvent
from app.domains.contents.repository import ContentFilters
from app.domains.recommendations.scoring.similarity import (
    BehaviorSimilarityIndex,
    SimilarityIndex,
)
from app.domains.recommendations.store import RecommendationStore
from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning
from app.domains.recommendations.types import (
    RecommendationAlgorithm,
    RecommendationOptions,
    ScoredContent,
    SimilarUser,
)


class CollaborativeScorer:
    """유사 사용자 투표 기반 추천

    유사 사용자가 없으면(콜드 스타트) 빈 목록을 반환하며, 호출자가
    콘텐츠 기반 추천으로 대체합니다.
    """

    def __init__(
        self,
        similarity_index: Optional[SimilarityIndex] = None,
        tuning: RecommendationTuning = DEFAULT_TUNING,
    ):
        self.tuning = tuning
        self.similarity_index = similarity_index or BehaviorSimilarityIndex(
            tuning
        )

    @property
    def vote_actions(self) -> list[InteractionAction]:
        return [
            InteractionAction(action)
            for action in self.tuning.collaborative_vote_weights
        ]

    def tally_votes(
        self,
        neighbors: Sequence[SimilarUser],
        events: Sequence[InteractionEvent],
    ) -> dict[int, float]:
        """콘텐츠별 득표 집계 (행동 가중치 × 사용자 유사도)

        Args:
            neighbors: 유사 사용자
            events: 유사 사용자의 긍정 행동

        Returns:
            콘텐츠 ID → 득표 점수
        """
        similarity = {n.user_id: n.similarity for n in neighbors}
        votes: dict[int, float] = defaultdict(float)
        for event in events:
            if event.user_id not in similarity:
                continue
            action = str(getattr(event.action, "value", event.action))
            weight = self.tuning.collaborative_vote_weights.get(action, 0.0)
            votes[event.content_id] += weight * similarity[event.user_id]
        return dict(votes)

    async def recommend(
        self,
        store: RecommendationStore,
        user_id: int,
        options: RecommendationOptions,
        now: Optional[datetime] = None,
    ) -> list[ScoredContent]:
        """협업 필터링 추천

        Args:
            store: 저장소
            user_id: 사용자 ID
            options: 추천 옵션
            now: 기준 시각

        Returns:
            정규화 점수 내림차순 목록 (최대 options.limit)
        """
        neighbors = await self.similarity_index.find_similar_users(
            store, user_id
        )
        if not neighbors:
            return []

        events = await store.behaviors.get_recent_by_users(
            [n.user_id for n in neighbors],
            actions=self.vote_actions,
            limit=self.tuning.neighbor_event_limit,
        )
        votes = self.tally_votes(neighbors, events)
        if not votes:
            return []

        ranked_ids = sorted(votes, key=lambda cid: (-votes[cid], cid))[
            : options.limit * 2
        ]
        if not options.include_viewed:
            viewed = await store.behaviors.get_viewed_content_ids(user_id)
            ranked_ids = [cid for cid in ranked_ids if cid not in viewed]
        if not ranked_ids:
            return []

        items = await store.contents.find(
            ContentFilters(
                ids=ranked_ids,
                content_type=options.content_type,
                any_tags=list(options.tags) or None,
                active_only=True,
                published_before=now or now_utc(),
            ),
            limit=None,
        )

        top_vote = max(votes[item.id] for item in items) if items else 0.0
        scored = [
            ScoredContent(
                content=item,
                score=votes[item.id] / top_vote if top_vote > 0 else 0.0,
                algorithm=RecommendationAlgorithm.COLLABORATIVE,
            )
            for item in items
        ]
        scored.sort(key=lambda s: (-s.score, s.content_id))
        return scored[: options.limit]
