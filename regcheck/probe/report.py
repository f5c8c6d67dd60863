"""
Report rendering
Results table and summary line for a finished run.
"""

from typing import Dict, List

from termcolor import colored

from .prober import ProbeOutcome


COLUMNS = [('Endpoint', 30), ('Status', 10), ('StatusCode', 10), ('ResponseTime', 15)]
OK_SYMBOL = '✓'
FAIL_SYMBOL = '✗'


def format_status(outcome: ProbeOutcome) -> str:
    return OK_SYMBOL if outcome.reachable else FAIL_SYMBOL


def format_status_code(outcome: ProbeOutcome) -> str:
    return str(outcome.status_code) if outcome.status_code else '-'


def format_response_time(outcome: ProbeOutcome) -> str:
    if outcome.timed_out:
        return 'timeout'
    return f"{outcome.elapsed or 0.0:.2f}s"


def render_header() -> str:
    header = ' '.join(f"{name:<{width}}" for name, width in COLUMNS).rstrip()
    return f"{header}\n{'-' * 65}"


def render_row(outcome: ProbeOutcome, color: bool = False) -> str:
    cells = [
        outcome.endpoint,
        format_status(outcome),
        format_status_code(outcome),
        format_response_time(outcome)
    ]
    padded = [f"{cell:<{width}}" for cell, (_, width) in zip(cells, COLUMNS)]

    if color:
        padded[1] = colored(padded[1], 'green' if outcome.reachable else 'red')
        if outcome.timed_out:
            padded[3] = colored(padded[3], 'yellow')

    return ' '.join(padded).rstrip()


def render_table(outcomes: List[ProbeOutcome], color: bool = False) -> str:
    lines = [render_header()]
    lines.extend(render_row(o, color=color) for o in outcomes)
    return '\n'.join(lines)


def render_summary(total: int, reachable: int) -> str:
    return f"reachable: {reachable}, total: {total}"


def print_report(result: Dict, color: bool = True):
    """Print the table for result['results'] and the run summary"""
    print()
    print(render_table(result['results'], color=color))

    summary = render_summary(result['total'], result['reachable'])
    if result.get('cancelled'):
        print(f"\n[!] Check cancelled after {result['total']}/{result['expected']} endpoints ({summary})")
    else:
        print(f"\n[OK] Check complete! ({summary})")
