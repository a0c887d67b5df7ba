"""요청 ID 컨텍스트 관리

asyncio 태스크는 생성 시점의 컨텍스트를 복사하므로, 요청 처리 중
spawn된 백그라운드 작업(추천 로그, 노출 집계)도 같은 요청 ID로
로그를 남깁니다.
"""

import contextvars
import uuid
from typing import Optional

request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


def get_request_id() -> Optional[str]:
    """현재 요청 ID 반환"""
    return request_id_ctx.get()


def set_request_id(request_id: Optional[str] = None) -> str:
    """요청 ID 설정 (없으면 UUID4로 새로 생성)"""
    if not request_id:
        request_id = str(uuid.uuid4())
    request_id_ctx.set(request_id)
    return request_id
