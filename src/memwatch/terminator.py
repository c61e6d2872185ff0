"""Platform-specific ways of ending the supervised child."""

import logging
import os
import signal
import subprocess
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class MemwatchError(Exception):
    """Base class for memwatch failures."""


class SignalError(MemwatchError):
    """The child could not be force-killed."""


class Terminator(ABC):
    """Ends a child process once memory runs low."""

    graceful: bool
    action: str
    description: str

    @abstractmethod
    def terminate(self, child: subprocess.Popen) -> None:
        """Ask (or force) the child to exit. Does not wait for it."""


class InterruptTerminator(Terminator):
    """
    Send SIGINT, the Ctrl-C equivalent, so the child can clean up.

    Used on POSIX systems. The child may take any amount of time to honor
    the signal, or ignore it entirely.
    """

    graceful = True
    action = "SIGINT"
    description = "Sending SIGINT to the child"

    def terminate(self, child: subprocess.Popen) -> None:
        try:
            child.send_signal(signal.SIGINT)
        except ProcessLookupError:
            # Exited between the liveness check and the signal
            logger.info("Child %d already exited before SIGINT", child.pid)


class KillTerminator(Terminator):
    """
    Kill the child outright.

    Used where there is no interrupt signal to deliver to another process,
    so there is no graceful phase.
    """

    graceful = False
    action = "kill"
    description = "Killing the child"

    def terminate(self, child: subprocess.Popen) -> None:
        try:
            child.kill()
        except OSError as err:
            raise SignalError(f"Failed to kill the child: {err}") from err


def platform_terminator(os_name: str = os.name) -> Terminator:
    """Pick the terminator for the current platform."""
    if os_name == "posix":
        return InterruptTerminator()
    return KillTerminator()
