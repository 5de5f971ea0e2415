"""Configuration data models."""

from dataclasses import dataclass, field
from pathlib import Path

from .release import Build, Profile


@dataclass(frozen=True)
class RepositorySource:
    """A Jenkins job publishing game builds for one channel and profile."""
    base_url: str
    job: str
    build: Build
    profile: Profile


def default_repositories() -> list[RepositorySource]:
    return [
        RepositorySource("http://jenkins.terasology.org", "DistroOmegaRelease", Build.STABLE, Profile.OMEGA),
        RepositorySource("http://jenkins.terasology.org", "DistroOmega", Build.NIGHTLY, Profile.OMEGA),
    ]


@dataclass(frozen=True)
class LauncherConfig:
    """Launcher configuration settings."""
    repositories: list[RepositorySource] = field(default_factory=default_repositories)
    build_limit: int = 10  # Most recent builds requested per job
    launcher_release_url: str = "https://api.github.com/repos/MovingBlocks/TerasologyLauncher/releases/latest"
    download_page_url: str = "https://terasology.org/download"
    search_for_launcher_updates: bool = True
    install_updates_in_place: bool = False  # False = open the download page after confirmation
    keep_downloaded_files: bool = False
    launcher_directory: Path = field(default_factory=lambda: Path.home() / ".local" / "share" / "game-launcher")
    request_timeout: float = 30.0
    max_retries: int = 0
    log_level: str = "INFO"
