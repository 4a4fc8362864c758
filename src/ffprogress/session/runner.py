"""Runs ffmpeg and wires its streams into a TranscodeSession."""

import asyncio
import codecs
import logging
from collections.abc import Callable

from ffprogress.config import get_settings
from ffprogress.models.progress import ProgressSnapshot
from ffprogress.models.session import SessionOptions
from ffprogress.session.process import ProcessHandle, launch
from ffprogress.session.state import TranscodeSession
from ffprogress.session.vitals import VitalsMonitor

logger = logging.getLogger(__name__)

UNKNOWN_EXIT_CODE = -1

_background_tasks: set[asyncio.Task] = set()


def _spawn_background_task(coro) -> asyncio.Task:
    task = asyncio.create_task(coro)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


class TranscodeRunner:
    """Starts ffmpeg sessions and pumps their output until exit."""

    def __init__(self):
        self.settings = get_settings()

    async def start(self, args: list[str], options: SessionOptions | None = None) -> TranscodeSession:
        """Launch ffmpeg and return its live session.

        The returned session is already receiving output; await
        ``session.wait_done()`` for the outcome.
        """
        options = options or SessionOptions()
        handle = await launch(args, options)

        session = TranscodeSession(args, options, terminate=handle.send_signal)
        session.pid = handle.pid
        if not options.capture_stdout:
            session.stdout = handle.stdout

        monitor = VitalsMonitor(
            handle.pid,
            session.record_memory_sample,
            interval_ms=self.settings.vitals_interval_ms,
        )
        session.attach_sampler(monitor)
        monitor.start()

        readers = [
            self._pump_text(handle.stderr, session, "stderr"),
            self._pump_progress(handle.progress, session),
        ]
        if options.capture_stdout:
            readers.append(self._pump_text(handle.stdout, session, "stdout"))

        session.supervisor = _spawn_background_task(self._supervise(handle, session, readers))
        return session

    async def run(
        self,
        args: list[str],
        options: SessionOptions | None = None,
        on_progress: Callable[[ProgressSnapshot], None] | None = None,
    ) -> str:
        """Run ffmpeg to completion; returns stderr or raises TranscodeError."""
        session = await self.start(args, options)
        if on_progress:
            session.on("progress", on_progress)
        return await session.wait_done()

    async def _pump_text(
        self, stream: asyncio.StreamReader, session: TranscodeSession, name: str
    ) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await stream.read(self.settings.read_chunk_size)
            if not chunk:
                break
            text = decoder.decode(chunk)
            if text:
                session.feed_output(text, name)
        tail = decoder.decode(b"", final=True)
        if tail:
            session.feed_output(tail, name)

    async def _pump_progress(self, stream: asyncio.StreamReader, session: TranscodeSession) -> None:
        while True:
            line = await stream.readline()
            if not line:
                break
            session.feed_progress_line(line.decode("utf-8", errors="replace"))

    async def _supervise(
        self, handle: ProcessHandle, session: TranscodeSession, readers: list
    ) -> None:
        # Unknown outcome unless the process reports one.
        code, signal = UNKNOWN_EXIT_CODE, None
        try:
            results = await asyncio.gather(*readers, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error("Reading ffmpeg pid=%s output failed: %s", handle.pid, result)
            code, signal = await handle.wait()
        finally:
            handle.close()
            if code == UNKNOWN_EXIT_CODE:
                logger.warning("Lost track of ffmpeg pid=%s, closing session as failed", handle.pid)
            session.close(code, signal)
