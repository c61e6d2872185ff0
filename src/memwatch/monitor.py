"""System memory sampling for memwatch."""

import logging

import psutil

logger = logging.getLogger(__name__)


def free_memory_bytes() -> int:
    """
    Return the host's current free physical memory in bytes.

    Every call queries psutil afresh; readings are never cached because
    memory pressure changes from one tick to the next.

    If the statistics cannot be read, a warning is logged and 0 is returned
    instead of raising.
    """
    try:
        mem = psutil.virtual_memory()
    except (OSError, psutil.Error) as err:
        logger.warning("Could not read memory statistics: %s", err)
        # Below any threshold >= 1 GB, so a failed read ends the child
        return 0
    return int(mem.free)
