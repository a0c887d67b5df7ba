"""추천 엔진 백그라운드 작업

추천 로그 기록, 프로모션 노출 집계처럼 응답 경로와 분리된 작업을
실행합니다. 실패는 로그만 남기고 호출자에게 전파하지 않습니다.
"""

import asyncio
from typing import Awaitable

from app.core.logging import get_logger

logger = get_logger(__name__)

# 실행 중인 작업이 GC 되지 않도록 참조 유지
_background_tasks: set[asyncio.Task] = set()


async def _run(awaitable: Awaitable[object], description: str) -> None:
    try:
        await awaitable
    except Exception as e:
        logger.warning(f"Background task failed ({description}): {e}")


def spawn(awaitable: Awaitable[object], description: str) -> asyncio.Task:
    """작업을 백그라운드로 실행 (fire-and-forget)

    Args:
        awaitable: 실행할 코루틴
        description: 로그에 남길 작업 설명

    Returns:
        생성된 태스크
    """
    task = asyncio.create_task(_run(awaitable, description))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


def pending_task_count() -> int:
    return len(_background_tasks)


async def wait_for_pending_tasks(timeout: float = 5.0) -> None:
    """대기 중인 백그라운드 작업 완료 대기 (종료 시 호출)"""
    if not _background_tasks:
        return

    logger.info(f"Waiting for {len(_background_tasks)} background tasks")
    _, pending = await asyncio.wait(
        set(_background_tasks), timeout=timeout
    )
    for task in pending:
        task.cancel()
    if pending:
        logger.warning(f"Cancelled {len(pending)} background tasks on shutdown")
