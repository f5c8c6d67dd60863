"""
Probe Runner
Drives one run: dispatch -> probe/aggregate (overlapping) -> report.
"""

import threading
import time
from typing import Dict, Iterable, Optional

from ..core.config import ConfigManager
from .aggregator import ResultAggregator
from .dispatcher import Dispatcher
from .prober import Prober
from .progress import ProgressReporter


def build_prober(config: ConfigManager) -> Prober:
    probe_config = config.probe
    return Prober(
        timeout=probe_config['timeout'],
        verify_tls=probe_config.get('verify_tls', False),
        path=probe_config.get('path', '/v2/'),
        user_agent=probe_config.get('user_agent'),
        pool_size=probe_config['workers']
    )


def run_check(lines: Iterable[str], config: ConfigManager, successes_only: bool = False,
              progress: Optional[ProgressReporter] = None,
              stop_event: Optional[threading.Event] = None,
              prober: Optional[Prober] = None) -> Dict:
    """
    Probe every endpoint in lines.

    Args:
        lines: Raw endpoint list lines (comments and blanks allowed)
        config: Loaded configuration
        successes_only: Restrict 'results' to reachable, non-timeout outcomes
        progress: Optional reporter notified after every outcome
        stop_event: Set to stop handing out queued endpoints
        prober: Prober to use instead of one built from config

    Returns:
        Result dict with the sorted report view and summary counters

    Raises:
        EmptyInputError: no endpoints after filtering, nothing was probed
    """
    states = ['idle']
    stop_event = stop_event or threading.Event()
    workers = config.probe['workers']
    owns_prober = prober is None
    if owns_prober:
        prober = build_prober(config)

    start = time.time()
    try:
        states.append('dispatching')
        dispatcher = Dispatcher(prober, workers, stop_event=stop_event)
        endpoints, pool, sink = dispatcher.dispatch(lines)

        print(f"[PROBE] Checking {len(endpoints)} endpoint(s) "
              f"(workers: {workers}, timeout: {config.probe['timeout']:.1f}s)")

        observers = [progress] if progress is not None else []
        aggregator = ResultAggregator(len(endpoints), observers=observers)

        # Outcomes are aggregated while the pool is still probing
        states.extend(['probing', 'aggregating'])
        try:
            aggregator.consume(sink, cancelled=stop_event.is_set)
        except KeyboardInterrupt:
            print("\n[!] Interrupted - waiting for in-flight probes...")
            pool.cancel()
            aggregator.consume(sink, cancelled=stop_event.is_set)

        if progress is not None:
            progress.finish()
    finally:
        if owns_prober:
            prober.close()

    states.append('reporting')
    results = aggregator.sorted_view(successes_only)
    summary = aggregator.summary()
    states.append('done')

    return {
        'success': True,
        'cancelled': not aggregator.complete,
        'total': summary['total'],
        'expected': summary['expected'],
        'reachable': summary['reachable'],
        'timeouts': summary['timeouts'],
        'successes_only': successes_only,
        'results': results,
        'successes': aggregator.successes(),
        'elapsed': time.time() - start,
        'states': states,
        'aggregator': aggregator
    }
