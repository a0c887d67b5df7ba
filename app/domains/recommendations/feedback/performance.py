"""추천 알고리즘 성과 분석

추천 로그와 이후의 사용자 행동을 대조해 알고리즘별 성과를 계산하는
읽기 전용 분석 단계입니다. 오케스트레이터는 이 결과로 사용자에게 가장
효과적이었던 알고리즘을 고릅니다.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, Sequence

from app.core.logging import get_logger
from app.domains.behaviors.models import InteractionEvent
from app.domains.recommendations.models import RecommendationLog
from app.domains.recommendations.store import RecommendationStore
from app.domains.recommendations.tuning import DEFAULT_TUNING, RecommendationTuning
from app.domains.recommendations.types import RecommendationAlgorithm

logger = get_logger(__name__)


@dataclass
class AlgorithmPerformance:
    """알고리즘별 누적 성과"""

    total_recommendations: int = 0
    interacted_recommendations: int = 0
    positive_actions: int = 0
    negative_actions: int = 0

    @property
    def interaction_rate(self) -> float:
        if not self.total_recommendations:
            return 0.0
        return self.interacted_recommendations / self.total_recommendations

    @property
    def score(self) -> float:
        """(긍정 행동 - 부정 행동) / 추천 수"""
        if not self.total_recommendations:
            return 0.0
        return (
            self.positive_actions - self.negative_actions
        ) / self.total_recommendations

    def to_dict(self) -> dict[str, float]:
        total = self.total_recommendations or 1
        return {
            "interaction_rate": self.interaction_rate,
            "positive_rate": self.positive_actions / total,
            "negative_rate": self.negative_actions / total,
            "score": self.score,
        }


@dataclass
class RecommendationEffectiveness:
    """사용자 단위 추천 효과 지표"""

    interaction_rate: float = 0.0
    conversion_rate: dict[str, float] = field(default_factory=dict)
    algorithm_performance: dict[str, AlgorithmPerformance] = field(
        default_factory=dict
    )


class AlgorithmPerformanceAnalyzer:
    """추천 로그 + 행동 기록 기반 알고리즘 성과 분석기"""

    def __init__(self, tuning: RecommendationTuning = DEFAULT_TUNING):
        self.tuning = tuning

    def evaluate(
        self,
        logs: Sequence[RecommendationLog],
        events: Sequence[InteractionEvent],
    ) -> RecommendationEffectiveness:
        """로그별로 이후에 발생한 행동을 집계

        Args:
            logs: 추천 로그
            events: 추천된 콘텐츠에 대한 사용자 행동

        Returns:
            추천 효과 지표
        """
        recommended_total = sum(len(log.content_ids or []) for log in logs)
        interacted_ids = {e.content_id for e in events}
        action_counts = Counter(
            str(getattr(e.action, "value", e.action)) for e in events
        )

        performance: dict[str, AlgorithmPerformance] = {}
        for log in logs:
            if not log.algorithm:
                continue

            recommended = set(log.content_ids or [])
            relevant = [
                e
                for e in events
                if e.content_id in recommended
                and e.timestamp >= log.created_at
            ]

            perf = performance.setdefault(
                log.algorithm, AlgorithmPerformance()
            )
            perf.total_recommendations += len(log.content_ids or [])
            perf.interacted_recommendations += len(
                {e.content_id for e in relevant}
            )
            for event in relevant:
                weight = self.tuning.action_weight(
                    str(getattr(event.action, "value", event.action))
                )
                if weight > 0:
                    perf.positive_actions += 1
                elif weight < 0:
                    perf.negative_actions += 1

        return RecommendationEffectiveness(
            interaction_rate=(
                len(interacted_ids) / recommended_total
                if recommended_total
                else 0.0
            ),
            conversion_rate={
                action: count / recommended_total
                for action, count in action_counts.items()
            }
            if recommended_total
            else {},
            algorithm_performance={
                name: perf
                for name, perf in performance.items()
                if perf.total_recommendations > 0
            },
        )

    async def analyze_recommendation_effectiveness(
        self, store: RecommendationStore, user_id: int
    ) -> Optional[RecommendationEffectiveness]:
        """사용자의 최근 추천 효과 분석 (추천 로그가 없으면 None)"""
        logs = await store.logs.get_recent_by_user(
            user_id, limit=self.tuning.performance_log_limit
        )
        if not logs:
            return None

        recommended_ids = {cid for log in logs for cid in log.content_ids or []}
        oldest = min(log.created_at for log in logs)
        events = await store.behaviors.get_by_user_and_contents(
            user_id, recommended_ids, since=oldest
        )
        return self.evaluate(logs, events)

    async def determine_best_algorithm(
        self, store: RecommendationStore, user_id: int
    ) -> RecommendationAlgorithm:
        """과거 성과가 가장 좋은 알고리즘 선택

        이력이 없거나 분석에 실패하면 기본 알고리즘(hybrid)을 반환합니다.
        """
        default = RecommendationAlgorithm.parse(
            self.tuning.default_algorithm, RecommendationAlgorithm.HYBRID
        )
        try:
            effectiveness = await self.analyze_recommendation_effectiveness(
                store, user_id
            )
        except Exception as e:
            logger.warning(
                f"Failed to analyze algorithm performance: {e}",
                extra={"user_id": user_id},
                exc_info=True,
            )
            return default

        if not effectiveness or not effectiveness.algorithm_performance:
            return default

        best_name, _ = max(
            effectiveness.algorithm_performance.items(),
            key=lambda item: item[1].score,
        )
        return RecommendationAlgorithm.parse(best_name, default)
