"""Main entry point for the game launcher.

This module provides the headless entry point with:
- Command-line argument parsing
- Service initialization and dependency injection
- The startup launcher-update check followed by release discovery
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from . import __version__
from .dialogs import ConsoleDialogs
from .models import GithubRelease, LauncherConfig
from .models.release import GameRelease
from .services.config import ConfigurationService
from .services.filesystem import FileSystemService
from .services.http_client import HttpClientService
from .services.installer import SelfUpdateInstaller
from .services.logging import setup_logging
from .services.remote_client import RemoteJsonClient
from .services.repository_manager import RepositoryManager
from .services.self_update import GithubReleaseSource, SelfUpdateResolver
from .services.startup import check_for_launcher_updates

log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Container for launcher services.

    Services are created lazily from the loaded configuration.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path: Path | None = config_path
        self._config_service: ConfigurationService | None = None
        self._config: LauncherConfig | None = None
        self._http_client: HttpClientService | None = None
        self._filesystem: FileSystemService | None = None

    @property
    def config_service(self) -> ConfigurationService:
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> LauncherConfig:
        if self._config is None:
            self._config = self.config_service.load_config()
        return self._config

    @property
    def http_client(self) -> HttpClientService:
        if self._http_client is None:
            self._http_client = HttpClientService(
                timeout=self.config.request_timeout,
                max_retries=self.config.max_retries,
            )
        return self._http_client

    @property
    def filesystem(self) -> FileSystemService:
        if self._filesystem is None:
            self._filesystem = FileSystemService()
        return self._filesystem

    @property
    def download_directory(self) -> Path:
        return self.config.launcher_directory / "download"

    @property
    def temp_directory(self) -> Path:
        return self.config.launcher_directory / "temp"

    def repository_manager(self) -> RepositoryManager:
        return RepositoryManager.from_sources(
            self.config.repositories,
            self.http_client,
            build_limit=self.config.build_limit,
        )

    def self_update_resolver(self, dialogs: ConsoleDialogs) -> SelfUpdateResolver:
        source = GithubReleaseSource(
            RemoteJsonClient(self.http_client, GithubRelease),
            self.config.launcher_release_url,
        )
        return SelfUpdateResolver(__version__, source, dialogs, filesystem=self.filesystem)

    def installer(self) -> SelfUpdateInstaller | None:
        if not self.config.install_updates_in_place:
            return None
        return SelfUpdateInstaller(
            self.http_client,
            filesystem=self.filesystem,
            keep_downloaded_files=self.config.keep_downloaded_files,
        )

    async def cleanup(self) -> None:
        if self._http_client is not None:
            await self._http_client.close()
        log.debug("Application cleanup complete")


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="game-launcher",
        description="Discover game builds and keep the launcher up to date",
    )
    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/game-launcher/config.json)",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured logging level",
    )
    _ = parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    _ = parser.add_argument(
        "--skip-update-check",
        action="store_true",
        help="Do not check for a newer launcher version",
    )
    _ = parser.add_argument("--yes", action="store_true", help="Accept launcher updates without asking")
    return parser.parse_args(argv)


def print_releases(releases: list[GameRelease]) -> None:
    if not releases:
        print("No game releases found.")
        return
    for release in releases:
        print(
            f"{release.id.profile.value:<7} {release.id.build.value:<8} "
            f"#{release.id.build_number:<6} {release.timestamp:%Y-%m-%d %H:%M}  {release.url}"
        )


async def run(context: ApplicationContext, dialogs: ConsoleDialogs, check_updates: bool) -> int:
    """Run the update check and list releases.

    Returns:
        Exit code (0 for success)
    """
    try:
        config = context.config
        for directory in (context.download_directory, context.temp_directory):
            context.filesystem.ensure_writable_directory(directory)

        if check_updates and config.search_for_launcher_updates:
            started = await check_for_launcher_updates(
                context.self_update_resolver(dialogs),
                dialogs,
                config.download_page_url,
                installer=context.installer(),
                download_directory=context.download_directory,
                temp_directory=context.temp_directory,
            )
            if started:
                log.info("Exit old launcher", version=__version__)
                return 0

        releases = await context.repository_manager().fetch_releases()
        print_releases(releases)
        return 0
    finally:
        await context.cleanup()


def main(argv: list[str] | None = None) -> None:
    args = parse_arguments(argv)
    context = ApplicationContext(config_path=args.config)

    _ = setup_logging(
        log_level=args.log_level or context.config.log_level,
        log_dir=args.log_dir,
    )
    log.info("Starting game launcher", version=__version__, config_path=str(context.config_service.config_path))

    try:
        exit_code = asyncio.run(run(context, ConsoleDialogs(assume_yes=args.yes), not args.skip_update_check))
    except KeyboardInterrupt:
        log.info("Launcher interrupted by user")
        exit_code = 130
    except OSError as e:
        log.error("Launcher directories can not be created or used", error=str(e), exc_info=True)
        print(f"Fatal error: {e}", file=sys.stderr)
        exit_code = 1

    log.info("Launcher exiting", exit_code=exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
