"""Transcode session state machine.

The session owns everything observed about one ffmpeg run: the accumulated
output, the file details, the best known duration and the terminal outcome.
It does no I/O itself. The runner feeds it output chunks, progress lines,
memory samples and the close notification, and hands it a ``terminate``
callback used to signal the process.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

from ffprogress.config import get_settings
from ffprogress.models.details import FileDetails
from ffprogress.models.errors import FailureKind, TranscodeError
from ffprogress.models.session import SessionOptions, SessionState
from ffprogress.parsing.metadata import BannerScanner, extract_details, scan_metadata_duration
from ffprogress.parsing.progress import ProgressBatcher, decode_progress

logger = logging.getLogger(__name__)

EVENTS = ("raw", "details", "progress", "end")


class Sampler(Protocol):
    def cancel(self) -> None: ...


class TranscodeSession:
    """Lifecycle of a single ffmpeg invocation."""

    def __init__(
        self,
        args: list[str],
        options: SessionOptions | None = None,
        terminate: Callable[[str], None] | None = None,
    ):
        settings = get_settings()
        self.options = options or SessionOptions()
        self.kill_signal = settings.kill_signal
        self.stop_signal = settings.stop_signal

        # Set by the runner once the process exists.
        self.pid: int | None = None
        self.stdout: asyncio.StreamReader | None = None
        self.supervisor: asyncio.Task | None = None

        self._args = list(args)
        self._terminate = terminate
        self._sampler: Sampler | None = None
        self._state = SessionState.RUNNING
        self._listeners: dict[str, list[Callable[..., Any]]] = {event: [] for event in EVENTS}

        self._output = ""
        self._stdout = ""
        self._stderr = ""
        self._batcher = ProgressBatcher()
        self._banner = BannerScanner()

        self._details: FileDetails | None = None
        self._metadata_duration: int | None = None

        self._user_signal: str | None = None
        self._self_signal: str | None = None
        self._out_of_memory = False
        self._observed_memory: int | None = None

        self._code: int | None = None
        self._signal: str | None = None
        self._error: TranscodeError | None = None
        self._details_waiters: list[asyncio.Future] = []
        self._done_waiters: list[asyncio.Future] = []

    # --- listeners -------------------------------------------------------

    def on(self, event: str, callback: Callable[..., Any]) -> "TranscodeSession":
        """Register a listener for ``raw``, ``details``, ``progress`` or ``end``."""
        if event not in self._listeners:
            raise ValueError(f"Unknown event '{event}', expected one of {EVENTS}")
        self._listeners[event].append(callback)
        return self

    def off(self, event: str, callback: Callable[..., Any]) -> None:
        if callback in self._listeners.get(event, []):
            self._listeners[event].remove(callback)

    def _emit(self, event: str, *payload: Any) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(*payload)
            except Exception:
                logger.exception("Listener for '%s' raised", event)

    # --- read-only views -------------------------------------------------

    @property
    def args(self) -> list[str]:
        return list(self._args)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def details(self) -> FileDetails | None:
        return self._details

    @property
    def output(self) -> str:
        return self._output

    @property
    def stdout_output(self) -> str:
        return self._stdout

    @property
    def stderr_output(self) -> str:
        return self._stderr

    @property
    def killed_by_self(self) -> str | None:
        return self._self_signal

    @property
    def killed_by_user(self) -> bool:
        return self._signal is not None and self._signal == self._user_signal

    @property
    def peak_observed_memory(self) -> int | None:
        return self._observed_memory

    @property
    def exit_code(self) -> int | None:
        return self._code

    @property
    def exit_signal(self) -> str | None:
        return self._signal

    @property
    def duration_hint(self) -> int | None:
        """Best known duration: caller value, then banner value, then metadata maximum."""
        if self.options.duration:
            return self.options.duration
        if self._details is not None and self._details.duration:
            return self._details.duration
        return self._metadata_duration

    # --- inbound notifications -------------------------------------------

    def feed_output(self, text: str, stream: str = "stderr") -> None:
        """Handle one decoded chunk of stdout or stderr."""
        if self._state is SessionState.CLOSED:
            logger.debug("Ignoring %d chars of output after close", len(text))
            return

        self._output += text
        if stream == "stdout":
            self._stdout += text
        else:
            self._stderr += text
        self._emit("raw", text)

        # The banner is only ever on stderr; stdout may carry the media payload.
        if stream == "stdout":
            return

        window = self._banner.window(self._stderr, len(text))
        metadata_duration = scan_metadata_duration(window)
        if metadata_duration is not None:
            self._metadata_duration = max(self._metadata_duration or 0, metadata_duration)

        if self._details is None and self._banner.feed(self._stderr, len(text)):
            self._set_details(extract_details(self._stderr))

    def feed_progress_line(self, line: str) -> None:
        """Handle one line from the ``-progress`` channel."""
        if self._state is SessionState.CLOSED:
            return
        batch = self._batcher.push(line)
        if batch is not None:
            snapshot = decode_progress(batch, self.duration_hint)
            self._emit("progress", snapshot)

    def record_memory_sample(self, memory: int) -> None:
        """Handle one resident-memory sample in bytes."""
        if self._state is SessionState.CLOSED:
            return
        self._observed_memory = memory

        ceiling = self.options.max_memory
        if ceiling is None or memory <= ceiling or self._out_of_memory:
            return

        logger.warning(
            "ffmpeg using %d bytes, above ceiling of %d; killing with %s",
            memory,
            ceiling,
            self.kill_signal,
        )
        self._out_of_memory = True
        self._self_signal = self.kill_signal
        self._send_signal(self.kill_signal)

    def attach_sampler(self, sampler: Sampler) -> None:
        self._sampler = sampler

    def kill(self, signal: str | None = None) -> None:
        """Ask the process to terminate; returns without waiting for it."""
        signal = signal or self.kill_signal
        if self._state is SessionState.CLOSED:
            logger.debug("Session already closed, not sending %s", signal)
            return
        self._user_signal = signal
        self._send_signal(signal)

    def stop(self) -> None:
        """Interrupt the process so ffmpeg finalises its output."""
        self.kill(self.stop_signal)

    def _send_signal(self, signal: str) -> None:
        self._state = SessionState.TERMINATING
        if self._terminate is not None:
            self._terminate(signal)

    def close(self, code: int | None, signal: str | None) -> None:
        """Terminal notification from the process; only the first call counts."""
        if self._state is SessionState.CLOSED:
            return

        if self._sampler is not None:
            self._sampler.cancel()
            self._sampler = None

        if self._batcher.pending:
            logger.debug("Discarding %d lines of an unfinished progress batch", self._batcher.pending)

        self._state = SessionState.CLOSED
        self._code = code
        self._signal = signal
        if code or signal:
            self._error = self._build_error()

        logger.info("ffmpeg closed with code=%s signal=%s", code, signal)
        self._emit("end", code, signal)

        for waiter in self._details_waiters:
            if not waiter.done():
                waiter.set_result(None)
        for waiter in self._done_waiters:
            if not waiter.done():
                waiter.set_result(None)
        self._details_waiters.clear()
        self._done_waiters.clear()

    # --- awaiting --------------------------------------------------------

    async def wait_details(self) -> FileDetails | None:
        """File details, immediately if known; None if the session ended without them."""
        if self._details is not None or self._state is SessionState.CLOSED:
            return self._details
        waiter = asyncio.get_running_loop().create_future()
        self._details_waiters.append(waiter)
        return await waiter

    async def wait_done(self) -> str:
        """Wait for the process to close.

        Returns the accumulated stderr on success and raises TranscodeError
        on a non-zero exit code or a signal.
        """
        if self._state is not SessionState.CLOSED:
            waiter = asyncio.get_running_loop().create_future()
            self._done_waiters.append(waiter)
            await waiter
        if self._error is not None:
            raise self._error
        return self._stderr

    # --- internals -------------------------------------------------------

    def _set_details(self, details: FileDetails) -> None:
        self._details = details
        self._emit("details", details.model_copy())
        for waiter in self._details_waiters:
            if not waiter.done():
                waiter.set_result(details)
        self._details_waiters.clear()

    def _build_error(self) -> TranscodeError:
        if self._out_of_memory:
            return TranscodeError(
                self._stderr,
                kind=FailureKind.OUT_OF_MEMORY,
                code=self._code,
                signal=self._signal,
                argv=self._args,
                killed_by_user=self.killed_by_user,
                memory_ceiling=self.options.max_memory,
                observed_memory=self._observed_memory,
            )
        return TranscodeError(
            self._stderr,
            code=self._code,
            signal=self._signal,
            argv=self._args,
            killed_by_user=self.killed_by_user,
        )
