"""Child process supervision engine for memwatch."""

import logging
import subprocess
import time
from collections.abc import Callable, Sequence

from memwatch.models import Exited, ExitOutcome, Terminated, WatchConfig
from memwatch.monitor import free_memory_bytes
from memwatch.terminator import MemwatchError, Terminator, platform_terminator

logger = logging.getLogger(__name__)

POLL_INTERVAL = 1.0


class SpawnError(MemwatchError):
    """The command could not be started."""


class Supervisor:
    """
    Runs one command and ends it when free memory drops below a threshold.

    Everything happens on the calling thread: check the child, sample
    memory, sleep, repeat. Once the child has exited or been told to stop,
    the supervisor blocks on a final wait with no timeout.
    """

    def __init__(
        self,
        sampler: Callable[[], int] = free_memory_bytes,
        terminator: Terminator | None = None,
        poll_interval: float = POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ) -> None:
        """
        Initialize the Supervisor.

        Args:
            sampler: Returns current free memory in bytes. Called once per tick.
            terminator: How to end the child. Defaults to the platform's choice.
            poll_interval: Seconds between ticks. Default 1.0s.
            sleep: Sleep function used between ticks.
            popen: Process factory with the subprocess.Popen signature.
        """
        self._sampler = sampler
        self._terminator = terminator if terminator is not None else platform_terminator()
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._popen = popen

    @property
    def terminator(self) -> Terminator:
        """Get the terminator in use."""
        return self._terminator

    def spawn(self, command: Sequence[str]) -> subprocess.Popen:
        """
        Start the child with stdin closed and stdout/stderr inherited.

        Raises:
            SpawnError: If the executable cannot be started.
        """
        try:
            child = self._popen(list(command), stdin=subprocess.DEVNULL)
        except (OSError, ValueError) as err:
            raise SpawnError(str(err)) from err
        logger.debug("Started %r as pid %d", command[0], child.pid)
        return child

    def run(self, config: WatchConfig) -> ExitOutcome:
        """
        Supervise config.command until it exits or is terminated.

        Raises:
            SpawnError: If the child could not be started.
            SignalError: If a forced kill failed.
        """
        child = self.spawn(config.command)
        exited = self._watch(child, config)

        returncode: int | None
        try:
            returncode = child.wait()
        except OSError as err:
            logger.warning("Error waiting for child process: %s", err)
            returncode = None

        if exited is not None:
            return exited

        outcome = Terminated(action=self._terminator.action, returncode=returncode)
        print(f"Child terminated with status: {outcome.status}", flush=True)
        return outcome

    def _watch(self, child: subprocess.Popen, config: WatchConfig) -> Exited | None:
        """
        Poll loop.

        Returns the Exited outcome if the child ended on its own, or None
        once the child has been sent the termination request.
        """
        threshold = config.threshold_bytes
        while True:
            returncode = child.poll()
            if returncode is not None:
                exited = Exited(returncode=returncode)
                print(f"Child exited with status: {exited.status}", flush=True)
                return exited

            free = self._sampler()
            logger.debug("Free memory: %d bytes (threshold %d)", free, threshold)
            if free < threshold:
                print(
                    f"Free memory below {config.threshold_gb} GB. {self._terminator.description}",
                    flush=True,
                )
                self._terminator.terminate(child)
                return None

            self._sleep(self._poll_interval)
