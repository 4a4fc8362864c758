"""Periodic resident-memory sampling of the ffmpeg process."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import psutil

logger = logging.getLogger(__name__)


async def resident_memory(pid: int) -> int:
    """Current RSS of ``pid`` in bytes."""
    return await asyncio.to_thread(lambda: psutil.Process(pid).memory_info().rss)


class VitalsMonitor:
    """Samples memory on a fixed interval until cancelled."""

    def __init__(
        self,
        pid: int,
        on_sample: Callable[[int], None],
        interval_ms: int = 500,
        probe: Callable[[int], Awaitable[int]] = resident_memory,
    ):
        self.pid = pid
        self.on_sample = on_sample
        self.interval = interval_ms / 1000
        self.probe = probe
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name=f"vitals-{self.pid}")

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.sample()

    async def sample(self) -> None:
        """Take one sample; failures are logged and skipped."""
        try:
            memory = await self.probe(self.pid)
        except (psutil.Error, OSError) as e:
            logger.warning("Vitals check for PID %s failed: %s", self.pid, e)
            return
        try:
            self.on_sample(memory)
        except Exception:
            logger.exception("Handling vitals sample for PID %s failed", self.pid)
