"""Launching ffmpeg with a dedicated progress pipe."""

import asyncio
import logging
import os
import signal as signals

from ffprogress.models.errors import ProcessLaunchError
from ffprogress.models.session import SessionOptions

logger = logging.getLogger(__name__)


class ProcessHandle:
    """A running ffmpeg process and the streams read from it."""

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        progress: asyncio.StreamReader,
        progress_transport: asyncio.ReadTransport,
    ):
        self.process = process
        self.progress = progress
        self.progress_transport = progress_transport

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def stdout(self) -> asyncio.StreamReader | None:
        return self.process.stdout

    @property
    def stderr(self) -> asyncio.StreamReader | None:
        return self.process.stderr

    def send_signal(self, name: str) -> None:
        if self.process.returncode is not None:
            logger.debug("Process %s already exited, not sending %s", self.pid, name)
            return
        try:
            sig = signals.Signals[name]
        except KeyError:
            raise ValueError(f"Unknown signal name '{name}'") from None
        try:
            self.process.send_signal(sig)
        except ProcessLookupError:
            logger.debug("Process %s vanished before %s was delivered", self.pid, name)

    def close(self) -> None:
        self.progress_transport.close()

    async def wait(self) -> tuple[int | None, str | None]:
        """Wait for exit and return ``(code, signal)``; exactly one is set."""
        returncode = await self.process.wait()
        if returncode < 0:
            try:
                return None, signals.Signals(-returncode).name
            except ValueError:
                return None, str(-returncode)
        return returncode, None


def build_command(args: list[str], options: SessionOptions, progress_fd: int) -> list[str]:
    """Full argv: tool, progress and banner flags, then the caller's arguments."""
    extra = ["-progress", f"pipe:{progress_fd}"]
    if options.hide_banner:
        extra.append("-hide_banner")
    return [options.cmd, *extra, *args]


async def launch(args: list[str], options: SessionOptions) -> ProcessHandle:
    """Spawn ffmpeg with stdout, stderr and a progress pipe attached."""
    read_fd, write_fd = os.pipe()
    cmd = build_command(args, options, write_fd)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=options.cwd,
            env=options.env,
            pass_fds=(write_fd,),
        )
    except (FileNotFoundError, PermissionError) as e:
        os.close(read_fd)
        raise ProcessLaunchError(
            f"Cannot start {options.cmd}: {e}",
            details={"command": options.cmd},
        ) from e
    finally:
        os.close(write_fd)

    loop = asyncio.get_running_loop()
    progress = asyncio.StreamReader()
    transport, _ = await loop.connect_read_pipe(
        lambda: asyncio.StreamReaderProtocol(progress), os.fdopen(read_fd, "rb", 0)
    )

    logger.info("Started %s pid=%s", " ".join(cmd), process.pid)
    return ProcessHandle(process=process, progress=progress, progress_transport=transport)
