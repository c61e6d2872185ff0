"""memwatch - command-line entry point."""

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from memwatch.models import WatchConfig
from memwatch.supervisor import SpawnError, Supervisor
from memwatch.terminator import SignalError

logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return version("memwatch")
    except PackageNotFoundError:
        return "unknown"


def _gigabytes(value: str) -> int:
    """argparse type for the threshold: a non-negative whole number of GB."""
    try:
        gb = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid threshold: {value!r}") from None
    if gb < 0:
        raise argparse.ArgumentTypeError(f"threshold must be >= 0, got {gb}")
    return gb


def build_parser() -> argparse.ArgumentParser:
    """Build the memwatch argument parser."""
    parser = argparse.ArgumentParser(
        prog="memwatch",
        description="Runs a command and ends it if free memory goes below a threshold.",
    )
    parser.add_argument(
        "-g",
        "--threshold",
        type=_gigabytes,
        default=1,
        metavar="GB",
        help="Free memory threshold in gigabytes (default: %(default)s)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every memory sample to stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to run with its arguments",
    )
    return parser


def parse_config(argv: list[str] | None = None) -> tuple[WatchConfig, bool]:
    """
    Parse command-line arguments into a WatchConfig.

    Returns the config and whether verbose logging was requested. Exits
    with status 2 on usage errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    command = list(args.command)
    # REMAINDER keeps the "--" separator; it belongs to memwatch, not the child
    if command[:1] == ["--"]:
        command = command[1:]
    if not command:
        parser.error("the following arguments are required: command")
    config = WatchConfig(command=tuple(command), threshold_gb=args.threshold)
    return config, args.verbose


def main(argv: list[str] | None = None) -> int:
    """Entry point for memwatch. Returns the process exit status."""
    config, verbose = parse_config(argv)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="memwatch: %(message)s",
        stream=sys.stderr,
    )

    supervisor = Supervisor()
    try:
        supervisor.run(config)
    except SpawnError as err:
        logger.error("Failed to start process: %s", err)
        return 1
    except SignalError as err:
        logger.error("%s", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
