"""Recommendations 순위 조정 모듈"""

from .blender import blend
from .diversity import ensure_diversity

__all__ = ["blend", "ensure_diversity"]
