#!/usr/bin/env python3
"""
Registry Check - Docker Registry Mirror Availability Checker

Usage:
    python registry_check.py check                 Probe every mirror in docker.txt
    python registry_check.py check -l              Only list reachable mirrors
    python registry_check.py check --update        Re-download docker.txt first
    python registry_check.py update                Re-download docker.txt only
    python registry_check.py mirrors               Show mirrors in daemon.json
    python registry_check.py apply --yes           Probe and write all reachable mirrors

Examples:
    python registry_check.py check --timeout 5 --workers 32
    python registry_check.py check --list-file mirrors.txt -l
    python registry_check.py apply --yes --restart
"""

import sys
import argparse
import platform
import threading

from regcheck import __version__
from regcheck.core import ConfigManager, RegCheckError
from regcheck.daemon import (
    DockerDaemonConfig,
    mirror_urls,
    is_docker_installed,
    reload_daemon,
    restart_docker
)
from regcheck.probe import ProgressReporter, run_check
from regcheck.probe.report import print_report
from regcheck.sources import ensure_list, load_list


BANNER = r"""
 ____            _     _                ____ _               _
|  _ \ ___  __ _(_)___| |_ _ __ _   _  / ___| |__   ___  ___| | __
| |_) / _ \/ _` | / __| __| '__| | | || |   | '_ \ / _ \/ __| |/ /
|  _ <  __/ (_| | \__ \ |_| |  | |_| || |___| | | |  __/ (__|   <
|_| \_\___|\__, |_|___/\__|_|   \__, | \____|_| |_|\___|\___|_|\_\
           |___/                |___/
        Docker Registry Mirror Checker
"""


def print_banner():
    try:
        print(BANNER)
    except UnicodeEncodeError:
        print("\n=== Registry Check - Docker Registry Mirror Checker ===\n")


def load_config(args) -> ConfigManager:
    overrides = {
        'probe': {
            'timeout': getattr(args, 'timeout', None),
            'workers': getattr(args, 'workers', None),
            'verify_tls': True if getattr(args, 'verify_tls', False) else None
        },
        'sources': {
            'list_file': getattr(args, 'list_file', None),
            'url': getattr(args, 'source_url', None)
        },
        'daemon': {
            'config_path': getattr(args, 'daemon_config', None)
        }
    }
    return ConfigManager(args.config, overrides=overrides)


def probe_mirrors(args, config: ConfigManager, successes_only: bool) -> dict:
    """Acquire the list and run the probe engine"""
    sources = config.sources
    lines = load_list(sources['list_file'], sources['url'],
                      force=getattr(args, 'update', False), timeout=sources['timeout'])

    progress = None
    if not args.no_progress:
        progress = ProgressReporter(color=not args.no_color)

    result = run_check(lines, config, successes_only=successes_only,
                       progress=progress, stop_event=threading.Event())
    print_report(result, color=not args.no_color)
    return result


def ask(question: str) -> str:
    try:
        return input(question).strip()
    except EOFError:
        return ''


def confirm(question: str) -> bool:
    return ask(f"{question} (y/n): ").lower() in ('y', 'yes')


def choose_mirrors(successes: list) -> list:
    """Prompt for all reachable mirrors or a single one"""
    print("\n[*] Choose an action:")
    print("    1. Replace with all reachable mirrors")
    print("    2. Pick a single mirror")
    choice = ask("Option (1/2): ")

    if choice == '1':
        return mirror_urls(successes)

    if choice == '2':
        print("\n[*] Reachable mirrors:")
        for i, outcome in enumerate(successes, 1):
            print(f"    {i}. {outcome.endpoint} (response time: {outcome.elapsed:.2f}s)")
        picked = ask("Mirror number: ")
        try:
            index = int(picked)
        except ValueError:
            index = 0
        if 1 <= index <= len(successes):
            return mirror_urls([successes[index - 1]])

    raise RegCheckError("Invalid choice")


def configure_daemon(config: ConfigManager, urls: list, restart: bool):
    daemon_config = config.daemon

    if not is_docker_installed():
        raise RegCheckError("Docker not found, install Docker first")

    store = DockerDaemonConfig(daemon_config['config_path'])
    new_config = store.apply(urls)

    print(f"\n[DAEMON] registry-mirrors: {', '.join(new_config['registry-mirrors'])}")
    reload_daemon(daemon_config['reload_command'])

    if restart:
        restart_docker(daemon_config['restart_command'])
        print("[OK] Docker restarted")


def cmd_check(args):
    """Probe mirrors and print the report"""
    config = load_config(args)
    result = probe_mirrors(args, config, successes_only=args.list_success)

    if args.no_configure or result['cancelled']:
        return
    if platform.system() != 'Linux' or not sys.stdin.isatty():
        return
    if not result['successes']:
        print("\n[!] No reachable mirrors, nothing to configure")
        return

    if not confirm("\n[*] Linux detected, configure Docker registry mirrors?"):
        return

    urls = choose_mirrors(result['successes'])
    configure_daemon(config, urls, restart=confirm("\n[*] Restart Docker now?"))


def cmd_update(args):
    """Force-refresh the endpoint list"""
    config = load_config(args)
    sources = config.sources
    info = ensure_list(sources['list_file'], sources['url'], force=True, timeout=sources['timeout'])
    print(f"\n[OK] Updated: {info['path']}")


def cmd_mirrors(args):
    """Show mirrors currently in daemon.json"""
    config = load_config(args)
    store = DockerDaemonConfig(config.daemon['config_path'])
    mirrors = store.mirrors()

    if not mirrors:
        print(f"\n[*] No registry mirrors in {store.path}")
        return

    print(f"\n[*] Mirrors in {store.path} ({len(mirrors)}):")
    for url in mirrors:
        print(f"    - {url}")


def cmd_apply(args):
    """Probe, then write every reachable mirror without prompting"""
    config = load_config(args)
    result = probe_mirrors(args, config, successes_only=True)

    if result['cancelled']:
        raise RegCheckError("Check was cancelled, daemon.json left unchanged")
    if not result['successes']:
        raise RegCheckError("No reachable mirrors, daemon.json left unchanged")

    urls = mirror_urls(result['successes'])
    if not args.yes and not confirm(f"\n[*] Write {len(urls)} mirror(s) to {config.daemon['config_path']}?"):
        print("\n[*] Aborted")
        return

    configure_daemon(config, urls, restart=args.restart)
    print(f"\n[OK] {len(urls)} mirror(s) configured")


def add_probe_arguments(p):
    p.add_argument('--timeout', type=float, default=None, help='Per-probe timeout in seconds (default: 10.0)')
    p.add_argument('--workers', type=int, default=None, help='Concurrent probes (default: 2 x CPU count)')
    p.add_argument('--update', action='store_true', help='Re-download the endpoint list before probing')
    p.add_argument('--verify-tls', action='store_true', help='Validate mirror TLS certificates')
    p.add_argument('--list-file', default=None, help='Endpoint list (default: docker.txt)')
    p.add_argument('--source-url', default=None, help='Where to download the endpoint list from')
    p.add_argument('--daemon-config', default=None, help='daemon.json path (default: /etc/docker/daemon.json)')
    p.add_argument('--no-progress', action='store_true', help='Hide the progress bar')
    p.add_argument('--no-color', action='store_true', help='Plain output')


def build_parser():
    parser = argparse.ArgumentParser(
        description='Registry Check - Docker Registry Mirror Checker',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--config', default=None, help='JSON config file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    # check
    p = subparsers.add_parser('check', help='Probe all mirrors')
    add_probe_arguments(p)
    p.add_argument('-l', '--list-success', action='store_true', help='Only show reachable mirrors')
    p.add_argument('--no-configure', action='store_true', help='Skip the daemon.json prompt')
    p.set_defaults(func=cmd_check)

    # update
    p = subparsers.add_parser('update', help='Re-download the endpoint list')
    p.add_argument('--list-file', default=None, help='Endpoint list (default: docker.txt)')
    p.add_argument('--source-url', default=None, help='Where to download the endpoint list from')
    p.set_defaults(func=cmd_update)

    # mirrors
    p = subparsers.add_parser('mirrors', help='Show mirrors in daemon.json')
    p.add_argument('--daemon-config', default=None, help='daemon.json path (default: /etc/docker/daemon.json)')
    p.set_defaults(func=cmd_mirrors)

    # apply
    p = subparsers.add_parser('apply', help='Probe and write reachable mirrors to daemon.json')
    add_probe_arguments(p)
    p.add_argument('--yes', action='store_true', help='Do not ask for confirmation')
    p.add_argument('--restart', action='store_true', help='Restart Docker after writing')
    p.set_defaults(func=cmd_apply)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    print_banner()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\n\n[!] Interrupted")
        sys.exit(1)
    except RegCheckError as e:
        print(f"\n[FAIL] {e}")
        sys.exit(1)
    except Exception as e:
        print(f"\n[FAIL] {str(e)}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
