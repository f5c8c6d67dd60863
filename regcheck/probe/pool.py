"""
Worker Pool
A fixed number of executors draining a shared job queue and pushing
outcomes to a result sink.
"""

import queue
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional

from .prober import ProbeOutcome


# Put on the sink once every executor has terminated
SINK_CLOSED = object()


class WorkerPool:
    """Runs N probing executors over a pre-filled job queue"""

    def __init__(self, jobs: queue.Queue, sink: queue.Queue, prober, workers: int,
                 stop_event: Optional[threading.Event] = None):
        if workers < 1:
            raise ValueError(f"worker count must be >= 1, got {workers}")

        self.jobs = jobs
        self.sink = sink
        self.prober = prober
        self.workers = workers
        self.stop_event = stop_event or threading.Event()

        self._executor: Optional[ThreadPoolExecutor] = None
        self._futures: List = []
        self._closer: Optional[threading.Thread] = None
        self._finished = threading.Event()
        self.processed = [0] * workers

    def start(self):
        if self._executor is not None:
            raise RuntimeError("Worker pool already started")

        self._executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix='probe')
        self._futures = [self._executor.submit(self._worker, i) for i in range(self.workers)]

        self._closer = threading.Thread(target=self._close_sink, name='probe-closer', daemon=True)
        self._closer.start()

    def _worker(self, worker_id: int):
        while not self.stop_event.is_set():
            try:
                endpoint = self.jobs.get_nowait()
            except queue.Empty:
                return

            try:
                outcome = self.prober.probe(endpoint)
            except Exception as e:
                # A broken probe still yields exactly one outcome
                outcome = ProbeOutcome.failure(endpoint, error=f"probe error: {e}"[:200])

            self.processed[worker_id] += 1
            self.sink.put(outcome)
            self.jobs.task_done()

    def _close_sink(self):
        wait(self._futures)
        self._executor.shutdown(wait=True)
        self.sink.put(SINK_CLOSED)
        self._finished.set()

    def cancel(self):
        """Stop handing out queued endpoints; in-flight probes finish"""
        self.stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self.stop_event.is_set()

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every executor has terminated"""
        return self._finished.wait(timeout)
