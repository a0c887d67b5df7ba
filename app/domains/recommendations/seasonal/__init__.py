"""Recommendations 시즌 모듈"""

from .calendar import (
    TCM_SEASONS,
    Season,
    TCMSeason,
    current_season,
    get_tcm_seasonal_info,
)
from .service import SeasonalBoostService, apply_promotions

__all__ = [
    "Season",
    "TCMSeason",
    "TCM_SEASONS",
    "current_season",
    "get_tcm_seasonal_info",
    "SeasonalBoostService",
    "apply_promotions",
]
