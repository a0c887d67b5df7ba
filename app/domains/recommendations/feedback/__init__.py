"""Recommendations 피드백 모듈"""

from .learner import EngagementPatterns, FeedbackWeightLearner, normalize
from .performance import (
    AlgorithmPerformance,
    AlgorithmPerformanceAnalyzer,
    RecommendationEffectiveness,
)

__all__ = [
    "EngagementPatterns",
    "FeedbackWeightLearner",
    "normalize",
    "AlgorithmPerformance",
    "AlgorithmPerformanceAnalyzer",
    "RecommendationEffectiveness",
]
