"""
Progress Reporter
Renders a completed/total bar on a single rewritten terminal line.
"""

import math
import sys
from typing import List, Optional, TextIO

from termcolor import colored


def percentage(completed: int, total: int) -> float:
    """Completion percentage floored to one decimal; 100.0 only when done"""
    if total <= 0:
        return 100.0
    return math.floor(1000 * completed / total) / 10


class ProgressReporter:
    """Aggregator observer drawing the completion bar"""

    def __init__(self, stream: Optional[TextIO] = None, width: int = 40,
                 enabled: bool = True, color: bool = True, prefix: str = '[PROBE]'):
        self.stream = stream if stream is not None else sys.stdout
        self.width = width
        self.enabled = enabled
        self.color = color
        self.prefix = prefix
        self.completed = 0
        self.total = 0
        self.history: List[float] = []

    def __call__(self, completed: int, total: int, outcome=None):
        self.update(completed, total)

    def update(self, completed: int, total: int):
        # Never move backwards
        if completed < self.completed:
            return
        self.completed = completed
        self.total = total

        pct = percentage(completed, total)
        self.history.append(pct)
        self._write('\r' + self.render(completed, total))

    def render(self, completed: int, total: int) -> str:
        pct = percentage(completed, total)
        filled = int(self.width * pct / 100)
        bar = '█' * filled + '░' * (self.width - filled)
        if self.color:
            bar = colored(bar, 'green' if pct >= 100 else 'cyan')
        return f"{self.prefix} [{bar}] {completed}/{total} ({pct:.1f}%)"

    def finish(self):
        self._write('\n')

    def _write(self, text: str):
        if not self.enabled:
            return
        try:
            self.stream.write(text)
            self.stream.flush()
        except (OSError, ValueError):
            # Closed or broken stream; keep probing without a bar
            self.enabled = False
