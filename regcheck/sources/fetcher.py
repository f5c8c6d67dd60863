"""
Endpoint list fetcher
Downloads the community mirror list when it is missing locally or a
refresh is forced.
"""

from pathlib import Path
from typing import Dict, List

import requests

from ..core.endpoints import read_lines
from ..core.errors import FetchError


def fetch_list(url: str, timeout: float = 30) -> bytes:
    """Download the raw list bytes"""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.Timeout:
        raise FetchError(f"Download timed out after {timeout}s: {url}")
    except requests.exceptions.RequestException as e:
        raise FetchError(f"Download failed: {e}")

    if response.status_code != 200:
        raise FetchError(f"Download failed, HTTP {response.status_code}: {url}")

    return response.content


def ensure_list(path: Path, url: str, force: bool = False, timeout: float = 30) -> Dict:
    """
    Make sure the endpoint list exists locally.

    Downloads when force is set or the file is missing. The local file is
    only replaced after a successful download.
    """
    path = Path(path)

    if not force and path.exists():
        return {'downloaded': False, 'path': path}

    reason = 'Updating' if force else 'Local list not found, downloading'
    print(f"[SOURCES] {reason} {path.name} from {url}")

    data = fetch_list(url, timeout=timeout)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise FetchError(f"Cannot save {path}: {e}")

    print(f"[SOURCES] Saved: {path} ({len(data)} bytes)")
    return {'downloaded': True, 'path': path, 'size': len(data)}


def load_list(path: Path, url: str, force: bool = False, timeout: float = 30) -> List[str]:
    """ensure_list followed by reading the raw lines"""
    info = ensure_list(path, url, force=force, timeout=timeout)
    return read_lines(info['path'])
