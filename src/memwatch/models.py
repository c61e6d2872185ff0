"""Data models for memwatch."""

import signal
from dataclasses import dataclass

GIGABYTE = 1024**3


def describe_returncode(returncode: int) -> str:
    """
    Format a Popen return code for display.

    Negative return codes mean the child was ended by a signal.
    """
    if returncode >= 0:
        return str(returncode)
    signum = -returncode
    try:
        name = signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"
    return f"signal {signum} ({name})"


@dataclass(slots=True, frozen=True)
class WatchConfig:
    """Immutable run configuration: threshold and the command to supervise."""

    command: tuple[str, ...]
    threshold_gb: int = 1

    def __post_init__(self) -> None:
        if not self.command:
            raise ValueError("command must contain at least the executable")
        if self.threshold_gb < 0:
            raise ValueError(f"threshold must be >= 0 GB, got {self.threshold_gb}")

    @property
    def threshold_bytes(self) -> int:
        """Threshold expressed in bytes."""
        return self.threshold_gb * GIGABYTE


@dataclass(slots=True, frozen=True)
class Exited:
    """The child ended on its own."""

    returncode: int

    @property
    def status(self) -> str:
        return describe_returncode(self.returncode)


@dataclass(slots=True, frozen=True)
class Terminated:
    """The supervisor ended the child after a low-memory reading."""

    action: str  # 'SIGINT' or 'kill'
    returncode: int | None  # None when the final wait failed

    @property
    def status(self) -> str:
        if self.returncode is None:
            return "unknown"
        return describe_returncode(self.returncode)


ExitOutcome = Exited | Terminated
