"""백그라운드 작업 단위 테스트"""

import asyncio

import pytest

from app.domains.recommendations.background import (
    pending_task_count,
    spawn,
    wait_for_pending_tasks,
)


@pytest.mark.asyncio
async def test_spawned_task_runs():
    """spawn한 작업은 대기 후 완료됨"""
    # Given
    done = []

    async def job():
        done.append(True)

    # When
    spawn(job(), "job")
    await wait_for_pending_tasks()

    # Then
    assert done == [True]
    assert pending_task_count() == 0


@pytest.mark.asyncio
async def test_failure_is_not_propagated():
    """작업 실패는 로그만 남기고 전파하지 않음"""

    async def failing():
        raise RuntimeError("boom")

    task = spawn(failing(), "failing job")
    await wait_for_pending_tasks()

    assert task.done()
    assert task.exception() is None


@pytest.mark.asyncio
async def test_wait_cancels_tasks_after_timeout():
    """타임아웃 이후 남은 작업은 취소"""

    async def slow():
        await asyncio.sleep(10)

    task = spawn(slow(), "slow job")
    await wait_for_pending_tasks(timeout=0.01)
    await asyncio.gather(task, return_exceptions=True)

    assert task.cancelled()
    assert pending_task_count() == 0
