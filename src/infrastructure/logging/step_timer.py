"""Async context manager for timing and logging pipeline steps."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from src.config.constants import PipelineStep
from src.infrastructure.logging.logger import StructuredLogger


class StepContext:
    """Mutable context for a timed pipeline step."""

    def __init__(self) -> None:
        self.state: dict[str, Any] = {}

    def set_result(self, **state: Any) -> None:
        self.state.update(state)


@asynccontextmanager
async def timed_step(
    step: PipelineStep,
    logger: StructuredLogger,
    **context: Any,
) -> AsyncGenerator[StepContext, None]:
    """Time a pipeline step; log success with its state or the failure, then re-raise."""
    ctx = StepContext()
    ctx.state.update(context)
    start = time.perf_counter()
    try:
        yield ctx
    except Exception as e:
        logger.log_error(step.value, e, ctx.state)
        raise
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.log_step(step.value, ctx.state, duration_ms=elapsed_ms)
