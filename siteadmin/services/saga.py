"""
Saga 执行器

数据库不提供客户端可见的多表事务，多步写入通过
「按序执行 + 失败时逆序补偿」来近似原子性。

每个 Saga 由有序的 (action, compensation) 步骤组成：
- 第 k 步失败时，按逆序执行 1..k-1 步中声明了补偿的步骤
- 补偿只执行一次，不重试；补偿自身失败只记录日志
- 一旦开始执行，调用方取消不会中断 Saga（运行至成功或补偿完成）
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from siteadmin.core.errors import SagaStepFailed
from siteadmin.core.logging import get_logger

logger = get_logger(__name__)

SagaContext = dict[str, Any]
StepFn = Callable[[SagaContext], Awaitable[Any]]


@dataclass
class SagaStep:
    """
    Saga 步骤

    action 的返回值写入 context[name]，供后续步骤使用。
    """

    name: str
    action: StepFn
    compensation: Optional[StepFn] = None


@dataclass
class SagaRunner:
    """
    Saga 执行器

    Args:
        name: Saga 名称（用于日志）
        steps: 有序步骤
        on_step_error: 步骤失败后、补偿前调用（如回滚失效的数据库会话）
    """

    name: str
    steps: list[SagaStep] = field(default_factory=list)
    on_step_error: Optional[Callable[[], Awaitable[None]]] = None

    async def run(self, context: Optional[SagaContext] = None) -> SagaContext:
        """执行 Saga，失败时抛出 SagaStepFailed"""
        ctx: SagaContext = dict(context or {})
        task = asyncio.ensure_future(self._execute(ctx))
        # 调用方被取消时 Saga 继续执行到结束，结果由回调记录
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.done():
                task.add_done_callback(self._log_detached_result)
            raise

    def _log_detached_result(self, task: asyncio.Future) -> None:
        if task.cancelled():
            logger.warning("saga_detached_cancelled", saga=self.name)
            return
        error = task.exception()
        if error is not None:
            logger.warning("saga_detached_failed", saga=self.name, error=str(error))
        else:
            logger.info("saga_detached_completed", saga=self.name)

    async def _execute(self, ctx: SagaContext) -> SagaContext:
        log = logger.bind(saga=self.name)
        completed: list[SagaStep] = []

        for step in self.steps:
            try:
                ctx[step.name] = await step.action(ctx)
            except Exception as e:
                log.warning("saga_step_failed", step=step.name, error=str(e))
                if self.on_step_error is not None:
                    await self.on_step_error()
                await self._compensate(completed, ctx)
                raise SagaStepFailed(self.name, step.name, e) from e
            completed.append(step)
            log.debug("saga_step_completed", step=step.name)

        log.info("saga_completed", steps=len(completed))
        return ctx

    async def _compensate(self, completed: list[SagaStep], ctx: SagaContext) -> None:
        log = logger.bind(saga=self.name)
        for step in reversed(completed):
            if step.compensation is None:
                continue
            try:
                await step.compensation(ctx)
                log.info("saga_compensated", step=step.name)
            except Exception as e:
                log.error("saga_compensation_failed", step=step.name, error=str(e))
                if self.on_step_error is not None:
                    await self.on_step_error()
