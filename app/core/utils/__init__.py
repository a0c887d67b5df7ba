"""유틸리티 모듈"""

from app.core.utils.datetime import UTC, ensure_utc, now_utc
from app.core.utils.pagination import PageParams
from app.core.utils.time import measure_time

__all__ = [
    # datetime
    "UTC",
    "now_utc",
    "ensure_utc",
    # pagination
    "PageParams",
    # time measurement
    "measure_time",
]
