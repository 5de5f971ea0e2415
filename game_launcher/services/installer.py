"""Self-update installer: downloads a launcher release and hands it to the replacer.

The running launcher cannot overwrite its own files, so the swap is done by
``game_launcher.replacer`` in a separate process that waits for this one to
exit first.
"""

import os
import subprocess
import sys
import zipfile
from pathlib import Path

import httpx
import py7zr
import structlog

from ..models.github import GithubRelease, GithubReleaseAsset
from .errors import UpdateError
from .filesystem import FileSystemService
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()

ARCHIVE_SUFFIXES = (".zip", ".7z")

PLATFORM_KEYWORDS = {
    "win32": ("windows", "win"),
    "linux": ("linux",),
    "darwin": ("mac", "osx", "macos"),
}


def detect_archive_type(path: Path) -> str | None:
    """Detect the archive type by reading file magic bytes.

    Returns:
        ``"zip"``, ``"7z"`` or None if the file is not a supported archive
    """
    with open(path, "rb") as f:
        magic_bytes = f.read(6)

    if magic_bytes[:2] == b"PK":
        return "zip"
    if magic_bytes == b"7z\xbc\xaf\x27\x1c":
        return "7z"
    return None


class SelfUpdateInstaller:
    """Stages launcher releases and starts the replacer process."""

    def __init__(
        self,
        http_client: HttpClientService,
        filesystem: FileSystemService | None = None,
        keep_downloaded_files: bool = False,
        platform: str = sys.platform,
    ) -> None:
        self.http_client = http_client
        self.filesystem = filesystem or FileSystemService()
        self.keep_downloaded_files = keep_downloaded_files
        self.platform = platform

    def select_asset(self, release: GithubRelease) -> GithubReleaseAsset | None:
        """Pick the archive for this platform, else the first archive."""
        archives = [a for a in release.assets if a.name.lower().endswith(ARCHIVE_SUFFIXES)]
        keywords = PLATFORM_KEYWORDS.get(self.platform, ())
        for asset in archives:
            name = asset.name.lower()
            if any(keyword in name for keyword in keywords):
                return asset
        return archives[0] if archives else None

    async def stage(
        self,
        release: GithubRelease,
        download_directory: Path,
        temp_directory: Path,
    ) -> Path:
        """Download and extract ``release``.

        Returns:
            Directory holding the new launcher files

        Raises:
            UpdateError: If there is no usable asset, or the download or
                extraction fails
        """
        asset = self.select_asset(release)
        if asset is None:
            raise UpdateError("The release has no launcher archive to install.", version=release.tag_name)

        self.filesystem.ensure_writable_directory(download_directory)
        archive_path = download_directory / asset.name
        try:
            await self.http_client.download_file(str(asset.browser_download_url), archive_path)
        except (httpx.HTTPError, OSError) as e:
            raise UpdateError("The launcher update could not be downloaded.", release.tag_name, e) from e

        staged = temp_directory / f"launcher-{release.tag_name}"
        try:
            self.filesystem.remove_tree(staged)
            self.filesystem.ensure_directory(staged)
            self._extract(archive_path, staged)
        except (OSError, zipfile.BadZipFile, py7zr.Bad7zFile) as e:
            raise UpdateError("The launcher update could not be extracted.", release.tag_name, e) from e
        finally:
            if not self.keep_downloaded_files and archive_path.exists():
                archive_path.unlink()

        root = self._unwrap(staged)
        log.info("Launcher update staged", version=release.tag_name, path=str(root))
        return root

    def _extract(self, archive_path: Path, destination: Path) -> None:
        archive_type = detect_archive_type(archive_path)
        log.info(
            "Extracting launcher archive",
            archive_path=str(archive_path),
            archive_type=archive_type,
            destination=str(destination),
        )
        if archive_type == "zip":
            with zipfile.ZipFile(archive_path, "r") as zf:
                zf.extractall(destination)
        elif archive_type == "7z":
            with py7zr.SevenZipFile(archive_path, mode="r") as archive:
                archive.extractall(path=destination)
        else:
            raise zipfile.BadZipFile(f"Unsupported archive format: {archive_path.name}")

    @staticmethod
    def _unwrap(staged: Path) -> Path:
        """Archives often wrap everything in one top-level folder; descend into it."""
        entries = list(staged.iterdir())
        if len(entries) == 1 and entries[0].is_dir():
            return entries[0]
        return staged

    def spawn_replacer(
        self,
        staged: Path,
        installation_directory: Path,
        relaunch: list[str] | None = None,
    ) -> subprocess.Popen[bytes]:
        """Start the detached replacer process for ``staged``.

        The caller must exit promptly afterwards; the replacer waits for it.

        Raises:
            UpdateError: If running frozen, the staged tree is not the launcher
                package or the process cannot be started
        """
        if getattr(sys, "frozen", False):
            raise UpdateError("In-place updates are not supported for packaged launcher builds.")
        if not (staged / "__init__.py").is_file():
            raise UpdateError("The update archive does not contain the launcher package.")

        command = [
            sys.executable,
            "-m",
            "game_launcher.replacer",
            "--pid",
            str(os.getpid()),
            "--source",
            str(staged),
            "--target",
            str(installation_directory),
        ]
        if relaunch:
            command += ["--", *relaunch]

        kwargs: dict[str, object] = {"cwd": str(staged.parent)}
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True

        try:
            process = subprocess.Popen(command, **kwargs)  # type: ignore[call-overload]
        except OSError as e:
            raise UpdateError("The launcher updater could not be started.", original_error=e) from e

        log.info("Replacer process started", pid=process.pid, command=command)
        return process
