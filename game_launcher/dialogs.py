"""Console implementation of the launcher dialog callbacks."""

import sys
import webbrowser
from pathlib import Path

import structlog

from .models.github import GithubRelease

log = structlog.stdlib.get_logger()


class ConsoleDialogs:
    """Dialogs rendered as plain terminal prompts."""

    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes

    def show_error(self, message: str) -> None:
        print(f"\nError: {message}\n", file=sys.stderr)

    def confirm_update(self, installation_directory: Path, release: GithubRelease) -> bool:
        print(f"\nA new launcher version is available: {release.name or release.tag_name}")
        print(f"Installation directory: {installation_directory}")
        if release.changelog:
            print("\nChangelog:\n")
            print(release.changelog.strip())
        if self.assume_yes:
            return True
        if not sys.stdin.isatty():
            log.info("Not a terminal, skipping update confirmation")
            return False
        answer = input("\nUpdate now? [y/N] ")
        return answer.strip().lower() in ("y", "yes")

    def open_uri(self, uri: str) -> None:
        if not webbrowser.open(uri):
            print(f"Open {uri} in your browser to download the update.")
