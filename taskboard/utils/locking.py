import fcntl
import logging
import os
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def host_lock(path: str):
    """
    Exclusive advisory lock shared by every worker process on this host.

    Blocks until the lock is free, so only one gunicorn worker at a time runs
    the guarded block.
    """
    lock_fd = open(path, "w")
    try:
        fcntl.flock(lock_fd, fcntl.LOCK_EX)
        logger.debug("[PROCESS %s] Acquired lock %s", os.getpid(), path)
        yield
    finally:
        fcntl.flock(lock_fd, fcntl.LOCK_UN)
        lock_fd.close()
