"""
Result Aggregator
Single consumer of the result sink. Owns the outcome count and the
collected outcomes, and derives the filtered/sorted report views.
"""

import queue
from typing import Callable, Dict, Iterable, List, Optional

from ..core.errors import AggregationError
from .pool import SINK_CLOSED
from .prober import ProbeOutcome


Observer = Callable[[int, int, ProbeOutcome], None]


class ResultAggregator:
    """Collects outcomes until every dispatched endpoint is accounted for"""

    def __init__(self, expected: int, observers: Iterable[Observer] = ()):
        if expected < 0:
            raise ValueError(f"expected count must be >= 0, got {expected}")
        self.expected = expected
        self.outcomes: List[ProbeOutcome] = []
        self.observers = list(observers)
        self.observer_errors: List[str] = []

    @property
    def completed(self) -> int:
        return len(self.outcomes)

    @property
    def complete(self) -> bool:
        return self.completed == self.expected

    def record(self, outcome: ProbeOutcome):
        if self.completed >= self.expected:
            raise AggregationError(
                f"Received more outcomes than dispatched endpoints ({self.expected})"
            )

        self.outcomes.append(outcome)

        for observer in self.observers:
            try:
                observer(self.completed, self.expected, outcome)
            except Exception as e:
                self.observer_errors.append(str(e))

    def consume(self, sink: queue.Queue, cancelled: Optional[Callable[[], bool]] = None):
        """
        Read outcomes until the pool closes the sink.

        The closing count has to match the dispatched count, unless the run
        was cancelled, in which case a partial set is accepted.
        """
        while True:
            item = sink.get()
            if item is SINK_CLOSED:
                break
            self.record(item)

        if not self.complete and not (cancelled and cancelled()):
            raise AggregationError(
                f"Pool finished with {self.completed} of {self.expected} outcomes"
            )

    def filtered(self, successes_only: bool = False) -> List[ProbeOutcome]:
        if not successes_only:
            return list(self.outcomes)
        return [o for o in self.outcomes if o.reachable and not o.timed_out]

    def sorted_view(self, successes_only: bool = False) -> List[ProbeOutcome]:
        return sorted(self.filtered(successes_only), key=lambda o: o.endpoint)

    def successes(self) -> List[ProbeOutcome]:
        """Sorted successful outcomes, as handed to the daemon config step"""
        return self.sorted_view(successes_only=True)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def reachable_count(self) -> int:
        return sum(1 for o in self.outcomes if o.reachable and not o.timed_out)

    @property
    def timeout_count(self) -> int:
        return sum(1 for o in self.outcomes if o.timed_out)

    def summary(self) -> Dict:
        return {
            'expected': self.expected,
            'total': self.total,
            'reachable': self.reachable_count,
            'unreachable': self.total - self.reachable_count,
            'timeouts': self.timeout_count
        }
