"""
Script contains functions for threading
"""

from concurrent import futures
import logging

logger = logging.getLogger(__name__)


class ThreadExecutor:
    """
    Class to fetch independent resources on a thread pool.

    Results always come back in input order, so callers can apply them
    sequentially no matter which fetch finished first.
    """

    def __init__(self, max_workers=4):
        self.max_workers = max(1, int(max_workers))

    def map(self, fn, items):
        items = list(items)
        if self.max_workers == 1 or len(items) < 2:
            return [fn(item) for item in items]

        workers = min(self.max_workers, len(items))
        logger.debug("ThreadExecutor: fetching %d items on %d threads", len(items), workers)
        with futures.ThreadPoolExecutor(max_workers=workers) as executor:
            # executor.map re-raises the first failure in input order
            return list(executor.map(fn, items))
