"""Data models for the game launcher."""

from .config import LauncherConfig, RepositorySource
from .github import GithubRelease, GithubReleaseAsset
from .release import Build, GameIdentifier, GameRelease, Profile, ReleaseMetadata

__all__ = [
    "Build",
    "GameIdentifier",
    "GameRelease",
    "GithubRelease",
    "GithubReleaseAsset",
    "LauncherConfig",
    "Profile",
    "ReleaseMetadata",
    "RepositorySource",
]
