"""
요청 흐름을 막지 않는 백그라운드 작업 실행

실패는 로그로만 남기고 호출자에게 전파하지 않는다.
"""

import asyncio
from typing import Any, Coroutine, Optional, Set

from pixyo.utils.logger import get_logger

logger = get_logger(__name__)

# 실행 중인 작업 참조 (GC 방지)
_background_tasks: Set[asyncio.Task] = set()


def _on_task_done(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            f"백그라운드 작업 실패: {task.get_name()}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )


def fire_and_forget(coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> asyncio.Task:
    """코루틴을 분리된 작업으로 실행"""
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_on_task_done)
    return task


def pending_task_count() -> int:
    return len(_background_tasks)


async def wait_for_background_tasks(timeout: Optional[float] = None) -> None:
    """남은 백그라운드 작업 완료 대기 (종료 시, 테스트)"""
    if not _background_tasks:
        return
    done, pending = await asyncio.wait(set(_background_tasks), timeout=timeout)
    if pending:
        logger.warning(f"완료되지 않은 백그라운드 작업 {len(pending)}개")
