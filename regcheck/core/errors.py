"""
Error types
Everything raised on purpose by regcheck derives from RegCheckError.
"""


class RegCheckError(Exception):
    """Base error for registry checks"""


class ConfigError(RegCheckError):
    """Invalid configuration value"""


class InputError(RegCheckError):
    """Endpoint list missing or unreadable"""


class EmptyInputError(InputError):
    """Endpoint list has no usable entries"""

    def __init__(self, message: str = 'Endpoint list is empty or has no valid hosts'):
        super().__init__(message)


class FetchError(RegCheckError):
    """Remote endpoint list could not be downloaded"""


class AggregationError(RegCheckError):
    """Outcome count disagrees with the dispatched count"""


class DaemonConfigError(RegCheckError):
    """daemon.json or service reload failure"""
