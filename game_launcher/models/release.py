"""Game release data models."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

import httpx


class Build(Enum):
    """Release channel of a game build."""
    STABLE = "stable"
    NIGHTLY = "nightly"

    @classmethod
    def parse(cls, value: str) -> "Build":
        return cls(value.strip().lower())


class Profile(Enum):
    """Packaging variant of the game."""
    OMEGA = "omega"
    ENGINE = "engine"

    @classmethod
    def parse(cls, value: str) -> "Profile":
        return cls(value.strip().lower())


@dataclass(frozen=True)
class GameIdentifier:
    """Identifies a release within one repository, channel and profile."""
    build_number: int
    build: Build
    profile: Profile

    def __post_init__(self) -> None:
        if isinstance(self.build_number, bool) or not isinstance(self.build_number, int):
            raise ValueError(f"build_number must be an integer, got {self.build_number!r}")
        if self.build_number < 1:
            raise ValueError(f"build_number must be positive, got {self.build_number}")


@dataclass(frozen=True)
class ReleaseMetadata:
    """Changelog, creation time and upstream success flag of a release."""
    changelog: tuple[str, ...]
    timestamp: datetime
    is_success: bool


@dataclass(frozen=True)
class GameRelease:
    """A downloadable game release."""
    id: GameIdentifier
    url: str
    metadata: ReleaseMetadata

    def __post_init__(self) -> None:
        try:
            parsed = httpx.URL(self.url)
        except (httpx.InvalidURL, TypeError) as e:
            raise ValueError(f"Malformed release URL {self.url!r}: {e}") from e
        if not parsed.is_absolute_url:
            raise ValueError(f"Release URL must be absolute, got {self.url!r}")

    @property
    def changelog(self) -> tuple[str, ...]:
        return self.metadata.changelog

    @property
    def timestamp(self) -> datetime:
        return self.metadata.timestamp


def datetime_from_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime without float rounding.

    Raises:
        ValueError: If the value is outside the supported datetime range
    """
    seconds, remainder = divmod(millis, 1000)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=remainder)
    except (OverflowError, OSError) as e:
        raise ValueError(f"Timestamp out of range: {millis}") from e
