"""Registry Check - concurrent reachability checks for container registry mirrors"""

__version__ = '1.0.0'
