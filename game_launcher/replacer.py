"""Helper process that swaps the launcher installation for a staged update.

Started by ``SelfUpdateInstaller.spawn_replacer``::

    python -m game_launcher.replacer --pid 1234 --source STAGED --target INSTALL -- relaunch args

It waits for the old launcher to exit, replaces ``--target`` with a copy of
``--source`` and optionally starts the relaunch command.
"""

import argparse
import ctypes
import os
import shutil
import subprocess
import sys
import time
from pathlib import Path

import structlog

from .services.logging import setup_logging

log = structlog.stdlib.get_logger()

EXIT_OK = 0
EXIT_REPLACE_FAILED = 1
EXIT_TIMEOUT = 2

_SYNCHRONIZE = 0x00100000
_WAIT_OBJECT_0 = 0


def process_alive(pid: int) -> bool:
    if os.name == "nt":
        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        handle = kernel32.OpenProcess(_SYNCHRONIZE, False, pid)
        if not handle:
            return False
        try:
            return kernel32.WaitForSingleObject(handle, 0) != _WAIT_OBJECT_0
        finally:
            kernel32.CloseHandle(handle)

    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, owned by someone else
        return True
    return True


def wait_for_exit(pid: int, timeout: float = 120.0, poll_interval: float = 0.5) -> bool:
    """Block until ``pid`` has exited. Returns False on timeout."""
    deadline = time.monotonic() + timeout
    while process_alive(pid):
        if time.monotonic() >= deadline:
            return False
        time.sleep(poll_interval)
    return True


def replace_installation(source: Path, target: Path) -> None:
    """Replace ``target`` with a copy of ``source``.

    The copy is prepared next to ``target`` so the swap is two renames on one
    file system. If the second rename fails the original installation is
    restored before the error propagates.

    Raises:
        OSError: If copying or renaming fails
    """
    staging = target.with_name(target.name + ".new")
    backup = target.with_name(target.name + ".old")
    for leftover in (staging, backup):
        if leftover.exists():
            shutil.rmtree(leftover)

    log.info("Copying new launcher files", source=str(source), staging=str(staging))
    shutil.copytree(source, staging)

    target.rename(backup)
    try:
        staging.rename(target)
    except OSError:
        log.error("Swap failed, restoring previous installation", target=str(target), exc_info=True)
        backup.rename(target)
        raise

    shutil.rmtree(backup, ignore_errors=True)
    log.info("Launcher installation replaced", target=str(target))


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="game-launcher-replacer",
        description="Replace the launcher installation once the running launcher has exited",
    )
    _ = parser.add_argument("--pid", type=int, required=True, help="Process id of the launcher to wait for")
    _ = parser.add_argument("--source", type=Path, required=True, help="Directory with the new launcher files")
    _ = parser.add_argument("--target", type=Path, required=True, help="Launcher installation directory")
    _ = parser.add_argument("--timeout", type=float, default=120.0, help="Seconds to wait for the launcher to exit")
    _ = parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    _ = parser.add_argument("relaunch", nargs=argparse.REMAINDER, help="Command to start after replacing")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_arguments(argv)
    _ = setup_logging(log_dir=args.log_dir or args.source.parent, console=False)

    log.info("Waiting for launcher to exit", pid=args.pid)
    if not wait_for_exit(args.pid, timeout=args.timeout):
        log.error("Launcher did not exit in time", pid=args.pid, timeout=args.timeout)
        return EXIT_TIMEOUT

    try:
        replace_installation(args.source, args.target)
    except OSError as e:
        log.error("Failed to replace launcher installation", error=str(e), exc_info=True)
        return EXIT_REPLACE_FAILED

    relaunch = [arg for arg in args.relaunch if arg != "--"]
    if relaunch:
        log.info("Relaunching launcher", command=relaunch)
        try:
            subprocess.Popen(relaunch, cwd=str(args.target))
        except OSError as e:
            # Files are already replaced; the user can start the launcher by hand
            log.error("Failed to relaunch launcher", command=relaunch, error=str(e))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
