"""Tests for RepositoryManager aggregation."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from game_launcher.models import Build, GameIdentifier, GameRelease, Profile, ReleaseMetadata
from game_launcher.models.config import RepositorySource
from game_launcher.services.http_client import HttpClientService
from game_launcher.services.jenkins_adapter import LegacyJenkinsRepositoryAdapter
from game_launcher.services.repository_manager import RepositoryManager


def make_release(number: int, build: Build = Build.STABLE, url_suffix: str = "") -> GameRelease:
    return GameRelease(
        GameIdentifier(number, build, Profile.OMEGA),
        f"http://jenkins.example.org/job/J/{number}/artifact/game{url_suffix}.zip",
        ReleaseMetadata(changelog=(), timestamp=datetime(2020, 1, 1, tzinfo=timezone.utc), is_success=True),
    )


def make_adapter(releases: list[GameRelease]) -> AsyncMock:
    adapter = AsyncMock(spec=LegacyJenkinsRepositoryAdapter)
    adapter.fetch_releases.return_value = releases
    return adapter


class TestRepositoryManager:
    """Test cases for RepositoryManager."""

    @pytest.mark.asyncio
    async def test_concatenates_in_adapter_order(self) -> None:
        manager = RepositoryManager([
            make_adapter([make_release(3), make_release(2)]),
            make_adapter([make_release(9, Build.NIGHTLY)]),
        ])

        releases = await manager.fetch_releases()

        assert [(r.id.build_number, r.id.build) for r in releases] == [
            (3, Build.STABLE),
            (2, Build.STABLE),
            (9, Build.NIGHTLY),
        ]

    @pytest.mark.asyncio
    async def test_duplicate_identifiers_keep_first(self) -> None:
        first = make_release(5, url_suffix="-first")
        second = make_release(5, url_suffix="-second")
        manager = RepositoryManager([make_adapter([first]), make_adapter([second, make_release(4)])])

        releases = await manager.fetch_releases()

        assert len(releases) == 2
        assert releases[0].url == first.url
        assert len({r.id for r in releases}) == len(releases)

    @pytest.mark.asyncio
    async def test_failed_repository_does_not_hide_others(self) -> None:
        manager = RepositoryManager([make_adapter([]), make_adapter([make_release(1)])])

        releases = await manager.fetch_releases()

        assert [r.id.build_number for r in releases] == [1]

    @pytest.mark.asyncio
    async def test_no_adapters(self) -> None:
        assert await RepositoryManager([]).fetch_releases() == []

    def test_from_sources_builds_one_adapter_per_source(self) -> None:
        sources = [
            RepositorySource("http://jenkins.example.org", "Release", Build.STABLE, Profile.OMEGA),
            RepositorySource("http://jenkins.example.org/", "Nightly", Build.NIGHTLY, Profile.ENGINE),
        ]

        manager = RepositoryManager.from_sources(sources, AsyncMock(spec=HttpClientService), build_limit=3)

        assert [a.build for a in manager.adapters] == [Build.STABLE, Build.NIGHTLY]
        assert [a.profile for a in manager.adapters] == [Profile.OMEGA, Profile.ENGINE]
        assert manager.adapters[1].api_url.startswith("http://jenkins.example.org/job/Nightly/api/json?tree=")
        assert all(a.api_url.endswith("{0,3}") for a in manager.adapters)
        assert manager.adapters[0].client is manager.adapters[1].client
