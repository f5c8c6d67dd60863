"""
Endpoint list parsing
One host per line; blank lines and '#' comments are skipped.
"""

from pathlib import Path
from typing import Iterable, List

from .errors import InputError


def filter_endpoints(lines: Iterable[str]) -> List[str]:
    """Trim lines and drop blanks and comments, keeping order and duplicates"""
    endpoints = []
    for line in lines:
        line = line.strip()
        if line and not line.startswith('#'):
            endpoints.append(line)
    return endpoints


def read_lines(path: Path) -> List[str]:
    """Read the raw lines of an endpoint list file"""
    path = Path(path)
    if not path.exists():
        raise InputError(f"Endpoint list not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8', errors='ignore') as f:
            return f.read().splitlines()
    except OSError as e:
        raise InputError(f"Cannot read endpoint list {path}: {e}")
