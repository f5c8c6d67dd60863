"""Core modules"""
from .config import ConfigManager
from .endpoints import filter_endpoints, read_lines
from .errors import (
    RegCheckError,
    ConfigError,
    InputError,
    EmptyInputError,
    FetchError,
    AggregationError,
    DaemonConfigError
)

__all__ = [
    'ConfigManager', 'filter_endpoints', 'read_lines',
    'RegCheckError', 'ConfigError', 'InputError', 'EmptyInputError',
    'FetchError', 'AggregationError', 'DaemonConfigError'
]
