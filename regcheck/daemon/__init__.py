"""Docker daemon mirror configuration"""
from .docker_config import (
    DockerDaemonConfig,
    MIRRORS_KEY,
    mirror_urls,
    is_docker_installed,
    reload_daemon,
    restart_docker
)

__all__ = [
    'DockerDaemonConfig', 'MIRRORS_KEY', 'mirror_urls',
    'is_docker_installed', 'reload_daemon', 'restart_docker'
]
