"""Tests for the process handle."""

import asyncio

import pytest

from ffprogress.session.process import ProcessHandle


class FakeProcess:
    def __init__(self, returncode):
        self.pid = 4321
        self.returncode = None
        self.stdout = None
        self.stderr = None
        self._exit = returncode
        self.sent = []

    async def wait(self):
        self.returncode = self._exit
        return self._exit

    def send_signal(self, sig):
        self.sent.append(sig)


class FakeTransport:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def _handle(returncode):
    return ProcessHandle(process=FakeProcess(returncode), progress=None, progress_transport=FakeTransport())


class TestProcessHandle:
    def test_signal_exit(self):
        handle = _handle(-9)
        assert asyncio.run(handle.wait()) == (None, "SIGKILL")

    def test_clean_exit(self):
        handle = _handle(0)
        assert asyncio.run(handle.wait()) == (0, None)
        assert handle.pid == 4321

    def test_unknown_signal_name(self):
        handle = _handle(0)
        with pytest.raises(ValueError):
            handle.send_signal("SIGBOGUS")
        assert handle.process.sent == []

    def test_signal_after_exit_not_sent(self):
        handle = _handle(0)
        asyncio.run(handle.wait())
        handle.send_signal("SIGINT")
        assert handle.process.sent == []

    def test_close_closes_progress_pipe(self):
        handle = _handle(0)
        handle.close()
        assert handle.progress_transport.closed
