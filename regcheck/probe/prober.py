"""
Registry Prober
One bounded HTTPS GET against a registry's /v2/ API root.

A registry counts as reachable when it answers with a 2xx/3xx status, or
with 401 (auth-only registries are still serving).
"""

import socket
import threading
import time
from dataclasses import dataclass, asdict
from typing import Callable, Dict, Optional

import requests
import urllib3
from requests.adapters import HTTPAdapter


DEFAULT_PATH = '/v2/'


def classify_status(status_code: int) -> bool:
    """True when a status code means the registry is serving"""
    return 200 <= status_code < 400 or status_code == 401


@dataclass
class ProbeOutcome:
    endpoint: str
    reachable: bool = False
    elapsed: Optional[float] = None
    status_code: int = 0
    timed_out: bool = False
    error: str = ''

    @property
    def is_success(self) -> bool:
        return self.reachable and not self.timed_out

    @classmethod
    def failure(cls, endpoint: str, timed_out: bool = False, error: str = '') -> 'ProbeOutcome':
        return cls(endpoint=endpoint, reachable=False, elapsed=None,
                   status_code=0, timed_out=timed_out, error=error)

    def to_dict(self) -> Dict:
        return asdict(self)


class DeadlineExceeded(Exception):
    """The request was still running when the probe deadline passed"""


def _is_timeout(exc: BaseException) -> bool:
    """
    Look for a timeout anywhere in the exception chain.

    requests wraps urllib3 errors in its own types, and urllib3 wraps socket
    errors in turn, so the root cause can sit under args, reason,
    __cause__ or __context__. The message text is never consulted.
    """
    if isinstance(exc, requests.exceptions.Timeout):
        return True

    pending = [exc]
    seen = set()
    while pending:
        current = pending.pop()
        if not isinstance(current, BaseException) or id(current) in seen:
            continue
        seen.add(id(current))

        # urllib3 files DNS failures and refused connections under ConnectTimeoutError
        if isinstance(current, urllib3.exceptions.NewConnectionError):
            continue
        if isinstance(current, (urllib3.exceptions.TimeoutError, socket.timeout, TimeoutError)):
            return True

        pending.extend(current.args)
        pending.extend((getattr(current, 'reason', None), current.__cause__, current.__context__))
    return False


class _Request:
    """A single GET running on a daemon thread that the caller may walk away from"""

    def __init__(self, send: Callable[[], requests.Response]):
        self._send = send
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._abandoned = False
        self.response = None
        self.error = None

    def _run(self):
        response = None
        try:
            response = self._send()
        except Exception as e:
            self.error = e
        with self._lock:
            if self._abandoned and response is not None:
                response.close()
            else:
                self.response = response
            self._done.set()

    def result(self, deadline: float) -> requests.Response:
        threading.Thread(target=self._run, name='probe-request', daemon=True).start()
        self._done.wait(deadline)

        with self._lock:
            if not self._done.is_set():
                self._abandoned = True
                raise DeadlineExceeded(f"Deadline of {deadline:g}s exceeded")

        if self.error is not None:
            raise self.error
        return self.response


class Prober:
    """Checks a single endpoint; safe to share between worker threads"""

    def __init__(self, timeout: float, verify_tls: bool = False, path: str = DEFAULT_PATH,
                 user_agent: Optional[str] = None, session: Optional[requests.Session] = None,
                 pool_size: int = 10, clock: Callable[[], float] = time.perf_counter,
                 scheme: str = 'https'):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.timeout = float(timeout)
        self.verify_tls = verify_tls
        self.path = path if path.startswith('/') else f'/{path}'
        self.user_agent = user_agent
        self.clock = clock
        self.scheme = scheme

        if not verify_tls:
            # Self-signed mirrors are expected
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
            session.mount(f'{scheme}://', adapter)
        self.session = session

    def build_url(self, endpoint: str) -> str:
        return f"{self.scheme}://{endpoint}{self.path}"

    def _get(self, endpoint: str) -> requests.Response:
        headers = {'User-Agent': self.user_agent} if self.user_agent else None
        return self.session.get(
            self.build_url(endpoint),
            headers=headers,
            timeout=(self.timeout, self.timeout),
            verify=self.verify_tls,
            allow_redirects=False,
            stream=True
        )

    def probe(self, endpoint: str) -> ProbeOutcome:
        """
        Probe one endpoint.

        Never raises for network problems: DNS, refused connections and TLS
        failures come back as unreachable outcomes, and only an expired
        deadline sets timed_out.

        The socket timeouts passed to requests only bound each read, so the
        request runs on its own thread and is abandoned once the deadline
        passes. A response that turns up later is closed unread.
        """
        start = self.clock()

        try:
            response = _Request(lambda: self._get(endpoint)).result(self.timeout)
        except DeadlineExceeded as e:
            return ProbeOutcome.failure(endpoint, timed_out=True, error=str(e))
        except requests.RequestException as e:
            return ProbeOutcome.failure(endpoint, timed_out=_is_timeout(e), error=str(e)[:200])

        try:
            status_code = response.status_code
        finally:
            response.close()

        elapsed = self.clock() - start
        if elapsed > self.timeout:
            return ProbeOutcome.failure(endpoint, timed_out=True,
                                        error=f"Deadline of {self.timeout:g}s exceeded")

        return ProbeOutcome(
            endpoint=endpoint,
            reachable=classify_status(status_code),
            elapsed=elapsed,
            status_code=status_code,
            timed_out=False
        )

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
