"""
Dispatcher
Filters the raw endpoint list, seeds the job queue and starts the pool.
"""

import queue
import threading
from typing import Iterable, List, Optional, Tuple

from ..core.endpoints import filter_endpoints
from ..core.errors import EmptyInputError
from .pool import WorkerPool


class Dispatcher:
    """Turns raw list lines into a running worker pool"""

    def __init__(self, prober, workers: int, stop_event: Optional[threading.Event] = None):
        if workers < 1:
            raise ValueError(f"worker count must be >= 1, got {workers}")
        self.prober = prober
        self.workers = workers
        self.stop_event = stop_event

    def dispatch(self, lines: Iterable[str]) -> Tuple[List[str], WorkerPool, queue.Queue]:
        """
        Start probing every endpoint in lines.

        Returns:
            Tuple of (dispatched endpoints, started pool, result sink)

        Raises:
            EmptyInputError: nothing left after filtering; no probe is made
        """
        endpoints = filter_endpoints(lines)
        if not endpoints:
            raise EmptyInputError()

        # Fully loaded before any worker starts, so no worker ever waits on it
        jobs = queue.Queue(maxsize=len(endpoints))
        for endpoint in endpoints:
            jobs.put_nowait(endpoint)

        sink = queue.Queue()
        pool = WorkerPool(jobs, sink, self.prober, self.workers, stop_event=self.stop_event)
        pool.start()

        return endpoints, pool, sink
