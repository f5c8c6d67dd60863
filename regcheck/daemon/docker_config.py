"""
Docker daemon configuration
Reads, merges and writes the registry-mirrors list in daemon.json and
reloads the Docker service.
"""

import json
import shlex
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List

from ..core.errors import DaemonConfigError


MIRRORS_KEY = 'registry-mirrors'


def mirror_urls(outcomes: Iterable) -> List[str]:
    """https:// URLs for successful outcomes, in the given order"""
    return [f"https://{o.endpoint}" for o in outcomes if o.reachable and not o.timed_out]


def is_docker_installed(docker_path: str = 'docker') -> bool:
    """Check if the docker CLI is available"""
    try:
        result = subprocess.run(
            [docker_path, '--version'],
            capture_output=True,
            timeout=10
        )
        return result.returncode == 0
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False


def run_command(command: str, timeout: int = 120):
    """Run a service command, raising DaemonConfigError on failure"""
    try:
        result = subprocess.run(
            shlex.split(command),
            capture_output=True,
            text=True,
            timeout=timeout
        )
    except FileNotFoundError:
        raise DaemonConfigError(f"Command not found: {command}")
    except subprocess.TimeoutExpired:
        raise DaemonConfigError(f"Command timed out: {command}")

    if result.returncode != 0:
        stderr = (result.stderr or '').strip()[:200]
        raise DaemonConfigError(f"'{command}' failed ({result.returncode}): {stderr}")


def reload_daemon(command: str = 'systemctl daemon-reload'):
    print(f"[DAEMON] Reloading: {command}")
    run_command(command)


def restart_docker(command: str = 'systemctl restart docker'):
    print(f"[DAEMON] Restarting: {command}")
    run_command(command)


class DockerDaemonConfig:
    """daemon.json access that keeps every key it does not own"""

    def __init__(self, path: str = '/etc/docker/daemon.json'):
        self.path = Path(path)

    def read(self) -> Dict:
        if not self.path.exists():
            return {}

        try:
            text = self.path.read_text(encoding='utf-8')
        except OSError as e:
            raise DaemonConfigError(f"Cannot read {self.path}: {e}")

        if not text.strip():
            return {}

        try:
            config = json.loads(text)
        except json.JSONDecodeError as e:
            raise DaemonConfigError(f"Cannot parse {self.path}: {e}")

        if not isinstance(config, dict):
            raise DaemonConfigError(f"{self.path} must contain a JSON object")
        return config

    def mirrors(self) -> List[str]:
        return list(self.read().get(MIRRORS_KEY, []))

    def merge_mirrors(self, urls: List[str]) -> Dict:
        """Current config with the mirror list replaced"""
        config = self.read()
        config[MIRRORS_KEY] = list(urls)
        return config

    def write(self, config: Dict):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=4)
                f.write('\n')
        except OSError as e:
            raise DaemonConfigError(f"Cannot write {self.path}: {e}")

        print(f"[DAEMON] Saved: {self.path}")

    def apply(self, urls: List[str]) -> Dict:
        if not urls:
            raise DaemonConfigError("No reachable mirrors to write")
        config = self.merge_mirrors(urls)
        self.write(config)
        return config
