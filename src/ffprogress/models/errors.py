"""Error hierarchy for ffprogress."""

from enum import StrEnum


class FFProgressError(Exception):
    """Base error for all ffprogress errors."""

    def __init__(self, message: str, component: str = "", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.details = details or {}


class ParseError(FFProgressError, ValueError):
    """A required field could not be found in the tool output."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="parsing", details=details)


class ProcessLaunchError(FFProgressError):
    """The tool binary could not be started."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="process", details=details)


class FailureKind(StrEnum):
    """Why a transcode session failed."""

    EXECUTION = "execution"
    OUT_OF_MEMORY = "out_of_memory"


class TranscodeError(FFProgressError):
    """Terminal failure of a transcode session.

    ``kind`` tells plain execution failures apart from sessions that were
    killed for exceeding their memory ceiling. ``memory_ceiling`` and
    ``observed_memory`` are only set for ``FailureKind.OUT_OF_MEMORY``.
    """

    def __init__(
        self,
        stderr: str,
        *,
        kind: FailureKind = FailureKind.EXECUTION,
        code: int | None = None,
        signal: str | None = None,
        argv: list[str] | None = None,
        killed_by_user: bool = False,
        memory_ceiling: int | None = None,
        observed_memory: int | None = None,
    ):
        if kind is FailureKind.OUT_OF_MEMORY:
            message = (
                f"ffmpeg exceeded its memory ceiling "
                f"({observed_memory} > {memory_ceiling} bytes), signal {signal}"
            )
        elif signal:
            message = f"ffmpeg terminated by signal {signal}"
        else:
            message = f"ffmpeg exited with code {code}"
        super().__init__(
            message,
            component="session",
            details={
                "kind": kind.value,
                "code": code,
                "signal": signal,
                "killed_by_user": killed_by_user,
            },
        )
        self.kind = kind
        self.stderr = stderr
        self.code = code
        self.signal = signal
        self.argv = list(argv or [])
        self.killed_by_user = killed_by_user
        self.memory_ceiling = memory_ceiling
        self.observed_memory = observed_memory

    @property
    def is_out_of_memory(self) -> bool:
        return self.kind is FailureKind.OUT_OF_MEMORY
