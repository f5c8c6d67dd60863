"""
Configuration Manager
Defaults, optional config.json overrides and command-line overrides.
"""

import copy
import json
import os
from pathlib import Path
from typing import Dict, Any, Optional

from .. import __version__
from .errors import ConfigError


DEFAULT_SOURCE_URL = 'https://raw.githubusercontent.com/YMingPro/docker-register-check/main/docker.txt'


def default_workers() -> int:
    """Two probes per available CPU"""
    return (os.cpu_count() or 1) * 2


def merge_settings(base: Dict, layer: Dict, skip_none: bool = False) -> Dict:
    """
    Return a copy of base with layer applied on top.

    Sections are merged key by key, so a layer only has to name what it
    changes. With skip_none, None values leave the base value alone
    (argparse reports unset options as None).
    """
    merged = copy.deepcopy(base)
    for key, value in layer.items():
        current = merged.get(key)
        if isinstance(current, dict):
            if not isinstance(value, dict):
                raise ConfigError(f"Section '{key}' must be an object, got {value!r}")
            merged[key] = merge_settings(current, value, skip_none)
        elif value is not None or not skip_none:
            merged[key] = copy.deepcopy(value)
    return merged


def read_config_file(path: Path) -> Dict:
    """Parse a JSON config file, tolerating a BOM and UTF-16 editors"""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    raw = path.read_bytes()
    encoding = 'utf-16' if raw[:2] in (b'\xff\xfe', b'\xfe\xff') else 'utf-8-sig'
    try:
        data = json.loads(raw.decode(encoding))
    except UnicodeDecodeError:
        raise ConfigError(f"Could not decode {path} as {encoding}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a JSON object: {path}")
    return data


class ConfigManager:
    """Manages configuration"""

    DEFAULTS = {
        'probe': {
            'timeout': 10.0,
            'workers': None,
            'verify_tls': False,
            'path': '/v2/',
            'user_agent': f'registry-check/{__version__}'
        },
        'sources': {
            'list_file': 'docker.txt',
            'url': DEFAULT_SOURCE_URL,
            'timeout': 30
        },
        'daemon': {
            'config_path': '/etc/docker/daemon.json',
            'reload_command': 'systemctl daemon-reload',
            'restart_command': 'systemctl restart docker'
        }
    }

    def __init__(self, config_file: Optional[str] = None, overrides: Optional[Dict] = None):
        self.config_file = Path(config_file) if config_file else None
        self.config = self.DEFAULTS
        if self.config_file is not None:
            self.config = merge_settings(self.config, read_config_file(self.config_file))
        self.config = merge_settings(self.config, overrides or {}, skip_none=True)
        if self.config['probe'].get('workers') is None:
            self.config['probe']['workers'] = default_workers()
        self.validate()

    def validate(self):
        """Reject values the probe engine cannot run with"""
        try:
            timeout = float(self.get('probe', 'timeout'))
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid timeout: {self.get('probe', 'timeout')!r}")
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}")

        workers = self.get('probe', 'workers')
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ConfigError(f"Worker count must be an integer >= 1, got {workers!r}")

        self.config['probe']['timeout'] = timeout

    def get(self, *keys, default: Any = None) -> Any:
        """Look up a setting by keys or a dotted path: get('probe', 'timeout') or get('probe.timeout')"""
        path = [part for key in keys for part in str(key).split('.')]
        value = self.config
        try:
            for part in path:
                value = value[part]
        except (KeyError, TypeError):
            return default
        return value

    @property
    def probe(self) -> Dict:
        return self.config['probe']

    @property
    def sources(self) -> Dict:
        return self.config['sources']

    @property
    def daemon(self) -> Dict:
        return self.config['daemon']
