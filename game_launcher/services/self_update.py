"""Launcher self-update resolution.

The resolver runs once at startup and walks a small state machine:

    CHECK -> AVAILABLE -> CONFIRM -> DONE

Anything that goes wrong while checking (service unreachable, odd tag,
already up to date) ends silently in DONE with ``NO_UPDATE``. Only a
launcher installation directory that cannot be used is reported to the
user, because in that case an available update would otherwise be skipped
without notice. The resolver never downloads or replaces files itself; a
confirmed update is handed back to the caller.
"""

import asyncio
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

import structlog
from packaging.version import InvalidVersion, Version

from ..models.github import GithubRelease
from .errors import ErrorHandlingService, get_error_service
from .filesystem import FileSystemService
from .remote_client import RemoteJsonClient

log = structlog.stdlib.get_logger()


class UpdateState(Enum):
    """States of the self-update resolver."""
    CHECK = "check"
    AVAILABLE = "available"
    CONFIRM = "confirm"
    DONE = "done"


class UpdateOutcome(Enum):
    """Terminal outcome of a self-update check."""
    NO_UPDATE = "no_update"
    CONFIRMED = "confirmed"
    VALIDATION_FAILED = "validation_failed"


@dataclass(frozen=True)
class UpdateCheckResult:
    """Outcome of a self-update check, with the release and directory involved."""
    outcome: UpdateOutcome
    release: GithubRelease | None = None
    installation_directory: Path | None = None


class LauncherDialogs(Protocol):
    """Dialog callbacks supplied by the presentation layer."""

    def show_error(self, message: str) -> None: ...

    def confirm_update(self, installation_directory: Path, release: GithubRelease) -> bool: ...

    def open_uri(self, uri: str) -> None: ...


class LauncherReleaseSource(Protocol):
    async def latest_release(self) -> GithubRelease | None: ...


class GithubReleaseSource:
    """Latest launcher release from the GitHub releases API."""

    def __init__(self, client: RemoteJsonClient[GithubRelease], url: str) -> None:
        self.client = client
        self.url = url

    async def latest_release(self) -> GithubRelease | None:
        release = await self.client.request(self.url)
        if release is not None and release.draft:
            log.debug("Ignoring draft release", tag=release.tag_name)
            return None
        return release


def detect_installation_directory() -> Path:
    """Directory holding the running launcher's files."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    # game_launcher/services/self_update.py -> game_launcher/
    return Path(__file__).resolve().parent.parent


class SelfUpdateResolver:
    """Checks for a newer launcher release and asks the user to update."""

    def __init__(
        self,
        current_version: str | Version,
        release_source: LauncherReleaseSource,
        dialogs: LauncherDialogs,
        filesystem: FileSystemService | None = None,
        locate_installation: Callable[[], Path] = detect_installation_directory,
        error_service: ErrorHandlingService | None = None,
    ) -> None:
        self.current_version = (
            current_version if isinstance(current_version, Version) else Version(current_version)
        )
        self.release_source = release_source
        self.dialogs = dialogs
        self.filesystem = filesystem or FileSystemService()
        self.locate_installation = locate_installation
        self.error_service = error_service or get_error_service()
        self._state = UpdateState.CHECK

    @property
    def state(self) -> UpdateState:
        return self._state

    def _transition(self, state: UpdateState) -> None:
        log.debug("Self-update state change", previous=self._state.value, state=state.value)
        self._state = state

    async def resolve(self) -> UpdateCheckResult:
        """Run the check once; a second call starts over from CHECK."""
        self._state = UpdateState.CHECK

        release = await self.update_available()
        if release is None:
            self._transition(UpdateState.DONE)
            return UpdateCheckResult(UpdateOutcome.NO_UPDATE)

        self._transition(UpdateState.AVAILABLE)
        installation_directory = self.check_installation_directory()
        if installation_directory is None:
            self._transition(UpdateState.DONE)
            return UpdateCheckResult(UpdateOutcome.VALIDATION_FAILED, release=release)

        self._transition(UpdateState.CONFIRM)
        confirmed = await self._confirm(installation_directory, release)
        self._transition(UpdateState.DONE)

        outcome = UpdateOutcome.CONFIRMED if confirmed else UpdateOutcome.NO_UPDATE
        log.info("Self-update check finished", outcome=outcome.value, version=str(release.version))
        return UpdateCheckResult(outcome, release=release, installation_directory=installation_directory)

    async def update_available(self) -> GithubRelease | None:
        """Latest release if it is strictly newer than the running version."""
        release = await self.release_source.latest_release()
        if release is None:
            log.info("No launcher release information available")
            return None

        try:
            latest = release.version
        except InvalidVersion:
            log.warning("Latest launcher release has an invalid version tag", tag=release.tag_name)
            return None

        if latest <= self.current_version:
            log.info("Launcher is up to date", current=str(self.current_version), latest=str(latest))
            return None

        log.info("Launcher update available", current=str(self.current_version), latest=str(latest))
        return release

    def check_installation_directory(self) -> Path | None:
        """Locate the installation and verify it can be written to.

        Reports a failure through the error dialog and returns ``None``.
        """
        directory: Path | None = None
        try:
            directory = self.locate_installation()
            self.filesystem.validate_existing_directory(directory)
        except OSError as e:
            friendly = self.error_service.handle_error(
                e,
                operation="check_installation_directory",
                component="self_update",
                context={"path": str(directory) if directory else None},
            )
            self.dialogs.show_error(
                "The launcher installation directory can not be detected or used!\n\n"
                + self.error_service.create_user_message(friendly)
            )
            return None

        log.debug("Launcher installation directory", path=str(directory))
        return directory

    async def _confirm(self, installation_directory: Path, release: GithubRelease) -> bool:
        try:
            return bool(
                await asyncio.to_thread(self.dialogs.confirm_update, installation_directory, release)
            )
        except Exception as e:
            log.error("Update confirmation dialog failed", error=str(e), exc_info=True)
            return False
