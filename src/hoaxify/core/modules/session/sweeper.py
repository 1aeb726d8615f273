import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)


class PeriodicSweeper:
    """Cancellable background task that runs ``sweep`` every ``interval`` seconds.

    The first sweep happens one interval after ``start``. A failed sweep is
    logged and retried on the next tick.
    """

    def __init__(self, sweep: Callable[[], Awaitable[int]], interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"Sweep interval must be positive, got {interval}")
        self._sweep = sweep
        self.interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="session-sweeper")
        logger.debug("session_sweeper_started", interval=self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("session_sweeper_stopped")

    async def run_once(self) -> int:
        return await self._sweep()

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                deleted = await self.run_once()
            except Exception:
                logger.exception("session_sweep_failed")
                continue
            if deleted:
                logger.info("expired_sessions_removed", count=deleted)
