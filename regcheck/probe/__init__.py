"""Concurrent registry probing"""
from .prober import Prober, ProbeOutcome, classify_status
from .pool import WorkerPool, SINK_CLOSED
from .dispatcher import Dispatcher
from .aggregator import ResultAggregator
from .progress import ProgressReporter, percentage
from .runner import run_check, build_prober

__all__ = [
    'Prober', 'ProbeOutcome', 'classify_status', 'WorkerPool', 'SINK_CLOSED',
    'Dispatcher', 'ResultAggregator', 'ProgressReporter', 'percentage',
    'run_check', 'build_prober'
]
