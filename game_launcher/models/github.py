"""Pydantic models for GitHub Release API responses.

Used to validate the "latest release" response describing published
launcher versions.
"""

from datetime import datetime

from packaging.version import Version
from pydantic import BaseModel, HttpUrl


class GithubReleaseAsset(BaseModel):
    """Model for a single asset in a GitHub release."""

    name: str
    browser_download_url: HttpUrl
    size: int = 0


class GithubRelease(BaseModel):
    """Model for a published launcher release."""

    tag_name: str
    name: str | None = None
    body: str | None = None
    html_url: HttpUrl | None = None
    published_at: datetime | None = None
    draft: bool = False
    prerelease: bool = False
    assets: list[GithubReleaseAsset] = []

    @property
    def version(self) -> Version:
        """Version parsed from the tag, e.g. ``v4.2.0`` -> ``4.2.0``.

        Raises:
            packaging.version.InvalidVersion: If the tag is not a version
        """
        return Version(self.tag_name.strip().lstrip("vV"))

    @property
    def changelog(self) -> str:
        return self.body or ""
