"""Shared fixtures for the probe engine tests."""

import threading
import time
from collections import Counter

import pytest

from regcheck.core import ConfigManager
from regcheck.probe import ProbeOutcome, classify_status


class FakeProber:
    """Prober stand-in answering from a table instead of the network."""

    def __init__(self, answers=None, delay=0.0, default_status=200):
        self.answers = answers or {}
        self.delay = delay
        self.default_status = default_status
        self.calls = Counter()
        self.closed = False
        self._lock = threading.Lock()

    def probe(self, endpoint):
        with self._lock:
            self.calls[endpoint] += 1
        if self.delay:
            time.sleep(self.delay)

        answer = self.answers.get(endpoint, self.default_status)
        if isinstance(answer, Exception):
            raise answer
        if answer == 'timeout':
            return ProbeOutcome.failure(endpoint, timed_out=True, error='timed out')
        if answer == 'refused':
            return ProbeOutcome.failure(endpoint, error='connection refused')
        return ProbeOutcome(endpoint=endpoint, reachable=classify_status(answer),
                            elapsed=0.05, status_code=answer)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_prober():
    return FakeProber()


@pytest.fixture
def config():
    return ConfigManager(overrides={'probe': {'workers': 4, 'timeout': 2.0}})
