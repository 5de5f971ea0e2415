"""Launcher update step of the startup sequence."""

import sys
from pathlib import Path

import httpx
import structlog

from .errors import AppError, ErrorHandlingService, get_error_service
from .installer import SelfUpdateInstaller
from .self_update import LauncherDialogs, SelfUpdateResolver, UpdateOutcome

log = structlog.stdlib.get_logger()


async def check_for_launcher_updates(
    resolver: SelfUpdateResolver,
    dialogs: LauncherDialogs,
    download_page_url: str,
    installer: SelfUpdateInstaller | None = None,
    download_directory: Path | None = None,
    temp_directory: Path | None = None,
    error_service: ErrorHandlingService | None = None,
) -> bool:
    """Check for and act on a newer launcher release.

    Without an installer a confirmed update opens the download page. With
    one, the release is staged and the replacer process started.

    Returns:
        True if the replacer was started and the launcher must exit now,
        False otherwise
    """
    result = await resolver.resolve()
    if result.outcome is not UpdateOutcome.CONFIRMED:
        return False

    if result.release is None or result.installation_directory is None:
        return False

    if installer is not None and download_directory is not None and temp_directory is not None:
        try:
            staged = await installer.stage(result.release, download_directory, temp_directory)
            relaunch = [sys.executable, "-m", "game_launcher.main", *sys.argv[1:]]
            installer.spawn_replacer(staged, result.installation_directory, relaunch=relaunch)
            log.info("Exit old launcher for self-update", version=result.release.tag_name)
            return True
        except (AppError, OSError, httpx.HTTPError) as e:
            service = error_service or get_error_service()
            friendly = service.handle_error(
                e,
                operation="install_launcher_update",
                component="startup",
                context={"path": str(result.installation_directory)},
            )
            dialogs.show_error(service.create_user_message(friendly))

    log.info("Opening launcher download page", url=download_page_url)
    dialogs.open_uri(download_page_url)
    return False
