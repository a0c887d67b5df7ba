"""Recommendations 점수 계산 모듈"""

from .collaborative import CollaborativeScorer
from .content import ContentBasedScorer
from .similarity import BehaviorSimilarityIndex, SimilarityIndex, jaccard_similarity

__all__ = [
    "ContentBasedScorer",
    "CollaborativeScorer",
    "BehaviorSimilarityIndex",
    "SimilarityIndex",
    "jaccard_similarity",
]
