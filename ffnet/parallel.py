"""
Fork-Join Helpers
=================

The matrix engine splits large operations into disjoint index ranges and runs
them on a thread pool. NumPy releases the GIL inside its kernels, so row blocks
of a matrix product really do run concurrently.

Rules every caller relies on:
- Ranges never overlap, so each output element is written by exactly one worker.
- ``parallel_for`` blocks until every chunk has finished.
- The first exception raised by a worker is re-raised in the caller.

Below ``PARALLEL_THRESHOLD`` units of work everything runs inline on the
calling thread.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

logger = logging.getLogger(__name__)

PARALLEL_THRESHOLD = 1000
MAX_WORKERS = os.cpu_count() or 1


def configure(threshold=None, max_workers=None):
    """
    Change the global parallelization settings.

    Args:
        threshold: Work size above which operations fan out (None keeps current)
        max_workers: Upper bound on worker threads (None keeps current)
    """
    global PARALLEL_THRESHOLD, MAX_WORKERS

    if threshold is not None:
        if threshold < 0:
            raise ValueError(f"threshold must be >= 0, got {threshold}")
        PARALLEL_THRESHOLD = int(threshold)

    if max_workers is not None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        MAX_WORKERS = int(max_workers)


@contextmanager
def parallel_settings(threshold=None, max_workers=None):
    """Temporarily override the settings, restoring them on exit."""
    saved = (PARALLEL_THRESHOLD, MAX_WORKERS)
    configure(threshold=threshold, max_workers=max_workers)
    try:
        yield
    finally:
        configure(threshold=saved[0], max_workers=saved[1])


def should_parallelize(work_size):
    """True when an operation of this size should fan out."""
    return MAX_WORKERS > 1 and work_size > PARALLEL_THRESHOLD


def partition(n, parts):
    """
    Split ``range(n)`` into at most ``parts`` contiguous, disjoint ranges.

    Returns:
        List of (start, stop) tuples covering [0, n) in order
    """
    parts = max(1, min(parts, n))
    size, extra = divmod(n, parts)

    ranges = []
    start = 0
    for i in range(parts):
        stop = start + size + (1 if i < extra else 0)
        if stop > start:
            ranges.append((start, stop))
        start = stop
    return ranges


def parallel_for(n, body, work_size=None):
    """
    Run ``body(start, stop)`` over [0, n), fanning out when the work is large.

    Args:
        n: Number of independent units along the outermost dimension
        body: Callable writing results for units [start, stop)
        work_size: Cost estimate compared against the threshold (default: n)

    Returns:
        True if the work ran on the thread pool, False if it ran inline
    """
    if work_size is None:
        work_size = n

    if n < 2 or not should_parallelize(work_size):
        body(0, n)
        return False

    chunks = partition(n, MAX_WORKERS)
    logger.debug("Fanning out %d units over %d workers", n, len(chunks))

    with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
        futures = [executor.submit(body, start, stop) for start, stop in chunks]
        for future in futures:
            future.result()

    return True
