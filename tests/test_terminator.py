"""Tests for the platform terminators."""

import signal

import pytest

from memwatch.terminator import (
    InterruptTerminator,
    KillTerminator,
    SignalError,
    Terminator,
    platform_terminator,
)


class RecordingChild:
    """Stands in for a Popen handle and records what was done to it."""

    pid = 4242

    def __init__(self, error: Exception | None = None) -> None:
        self.signals: list[int] = []
        self.kills = 0
        self._error = error

    def send_signal(self, sig: int) -> None:
        if self._error is not None:
            raise self._error
        self.signals.append(sig)

    def kill(self) -> None:
        if self._error is not None:
            raise self._error
        self.kills += 1


class TestPlatformTerminator:
    """Tests for platform selection."""

    def test_posix_is_graceful(self):
        terminator = platform_terminator("posix")
        assert isinstance(terminator, InterruptTerminator)
        assert terminator.graceful is True

    def test_other_platforms_kill(self):
        terminator = platform_terminator("nt")
        assert isinstance(terminator, KillTerminator)
        assert terminator.graceful is False

    def test_default_is_a_terminator(self):
        assert isinstance(platform_terminator(), Terminator)


class TestInterruptTerminator:
    """Tests for the SIGINT terminator."""

    def test_sends_sigint_once(self):
        child = RecordingChild()
        InterruptTerminator().terminate(child)

        assert child.signals == [signal.SIGINT]
        assert child.kills == 0

    def test_vanished_child_is_ignored(self):
        """Test a child that already exited does not raise."""
        child = RecordingChild(error=ProcessLookupError())
        InterruptTerminator().terminate(child)

    def test_description(self):
        terminator = InterruptTerminator()
        assert terminator.action == "SIGINT"
        assert "SIGINT" in terminator.description


class TestKillTerminator:
    """Tests for the forced-kill terminator."""

    def test_kills_once(self):
        child = RecordingChild()
        KillTerminator().terminate(child)

        assert child.kills == 1
        assert child.signals == []

    def test_kill_failure_is_fatal(self):
        child = RecordingChild(error=PermissionError("access denied"))

        with pytest.raises(SignalError, match="Failed to kill the child"):
            KillTerminator().terminate(child)
