"""Tests for the launcher self-update resolver."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from packaging.version import Version

import game_launcher
from game_launcher.models import GithubRelease
from game_launcher.services.errors import ErrorHandlingService
from game_launcher.services.filesystem import FileSystemService
from game_launcher.services.remote_client import RemoteJsonClient
from game_launcher.services.self_update import (
    GithubReleaseSource,
    SelfUpdateResolver,
    UpdateOutcome,
    UpdateState,
    detect_installation_directory,
)


def make_release(tag: str, **extra: object) -> GithubRelease:
    return GithubRelease.model_validate({"tag_name": tag, "body": "Bug fixes", **extra})


def make_resolver(
    release: GithubRelease | None,
    installation_directory: Path,
    current_version: str = "4.1.0",
    confirm: bool | Exception = True,
    filesystem: FileSystemService | None = None,
) -> tuple[SelfUpdateResolver, MagicMock]:
    source = AsyncMock()
    source.latest_release.return_value = release
    dialogs = MagicMock()
    if isinstance(confirm, Exception):
        dialogs.confirm_update.side_effect = confirm
    else:
        dialogs.confirm_update.return_value = confirm
    resolver = SelfUpdateResolver(
        current_version,
        source,
        dialogs,
        filesystem=filesystem,
        locate_installation=lambda: installation_directory,
        error_service=ErrorHandlingService(),
    )
    return resolver, dialogs


class TestNoUpdate:
    """Paths that end without involving the user."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag", ["v4.1.0", "4.0.9", "v3.0.0", "v4.1.0rc1"])
    async def test_not_newer_release_is_a_no_op(self, tmp_path: Path, tag: str) -> None:
        filesystem = MagicMock(spec=FileSystemService)
        resolver, dialogs = make_resolver(make_release(tag), tmp_path, filesystem=filesystem)

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.NO_UPDATE
        assert result.release is None
        assert dialogs.method_calls == []
        assert filesystem.method_calls == []
        assert resolver.state is UpdateState.DONE

    @pytest.mark.asyncio
    async def test_unavailable_release_is_a_no_op(self, tmp_path: Path) -> None:
        resolver, dialogs = make_resolver(None, tmp_path)

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.NO_UPDATE
        assert dialogs.method_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag", ["latest", "", "release-candidate"])
    async def test_invalid_tag_is_a_no_op(self, tmp_path: Path, tag: str) -> None:
        resolver, dialogs = make_resolver(make_release(tag), tmp_path)

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.NO_UPDATE
        assert dialogs.method_calls == []


class TestUpdateAvailable:
    """A newer release leads to the confirmation dialog."""

    @pytest.mark.asyncio
    async def test_confirmed_update(self, tmp_path: Path) -> None:
        release = make_release("v4.2.0")
        resolver, dialogs = make_resolver(release, tmp_path)

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.CONFIRMED
        assert result.release == release
        assert result.installation_directory == tmp_path
        dialogs.confirm_update.assert_called_once_with(tmp_path, release)
        dialogs.show_error.assert_not_called()
        assert resolver.state is UpdateState.DONE

    @pytest.mark.asyncio
    async def test_declined_update(self, tmp_path: Path) -> None:
        resolver, dialogs = make_resolver(make_release("v5.0.0"), tmp_path, confirm=False)

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.NO_UPDATE
        assert result.installation_directory == tmp_path
        dialogs.confirm_update.assert_called_once()

    @pytest.mark.asyncio
    async def test_failing_dialog_counts_as_declined(self, tmp_path: Path) -> None:
        resolver, _ = make_resolver(make_release("v5.0.0"), tmp_path, confirm=RuntimeError("no display"))

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.NO_UPDATE
        assert resolver.state is UpdateState.DONE

    @pytest.mark.asyncio
    async def test_accepts_version_object(self, tmp_path: Path) -> None:
        resolver, _ = make_resolver(make_release("v1.0.1"), tmp_path, current_version=Version("1.0.0"))
        assert (await resolver.resolve()).outcome is UpdateOutcome.CONFIRMED


class TestInstallationDirectory:
    """Validation of the launcher installation directory."""

    @pytest.mark.asyncio
    async def test_missing_directory_reports_error(self, tmp_path: Path) -> None:
        resolver, dialogs = make_resolver(make_release("v4.2.0"), tmp_path / "missing")

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.VALIDATION_FAILED
        dialogs.show_error.assert_called_once()
        message = dialogs.show_error.call_args.args[0]
        assert message.startswith("The launcher installation directory can not be detected or used!")
        dialogs.confirm_update.assert_not_called()
        assert resolver.state is UpdateState.DONE

    @pytest.mark.asyncio
    async def test_file_instead_of_directory_reports_error(self, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "launcher.bin"
        not_a_dir.write_bytes(b"")
        resolver, dialogs = make_resolver(make_release("v4.2.0"), not_a_dir)

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.VALIDATION_FAILED
        dialogs.show_error.assert_called_once()

    @pytest.mark.asyncio
    async def test_unwritable_directory_reports_error(self, tmp_path: Path) -> None:
        filesystem = FileSystemService()
        filesystem.check_write_permission = MagicMock(return_value=False)  # type: ignore[method-assign]
        resolver, dialogs = make_resolver(make_release("v4.2.0"), tmp_path, filesystem=filesystem)

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.VALIDATION_FAILED
        dialogs.show_error.assert_called_once()

    @pytest.mark.asyncio
    async def test_locator_failure_reports_error(self) -> None:
        def locate() -> Path:
            raise OSError("cannot resolve executable")

        source = AsyncMock()
        source.latest_release.return_value = make_release("v9.0.0")
        dialogs = MagicMock()
        resolver = SelfUpdateResolver(
            "1.0.0", source, dialogs, locate_installation=locate, error_service=ErrorHandlingService()
        )

        result = await resolver.resolve()

        assert result.outcome is UpdateOutcome.VALIDATION_FAILED
        dialogs.show_error.assert_called_once()

    def test_detect_installation_directory_is_package_directory(self) -> None:
        directory = detect_installation_directory()

        assert directory == Path(game_launcher.__file__).resolve().parent
        assert (directory / "__init__.py").is_file()
        assert (directory / "replacer.py").is_file()

    def test_detect_installation_directory_never_returns_site_packages(self) -> None:
        directory = detect_installation_directory()
        assert not (directory / "game_launcher").exists()
        assert directory.name == "game_launcher"


class TestGithubReleaseSource:
    """Latest release lookup via the remote client."""

    @pytest.mark.asyncio
    async def test_returns_release(self) -> None:
        client = AsyncMock(spec=RemoteJsonClient)
        client.request.return_value = make_release("v1.2.3")
        source = GithubReleaseSource(client, "https://api.github.com/repos/o/r/releases/latest")

        release = await source.latest_release()

        assert release is not None
        assert release.tag_name == "v1.2.3"
        client.request.assert_awaited_once_with("https://api.github.com/repos/o/r/releases/latest")

    @pytest.mark.asyncio
    async def test_draft_is_ignored(self) -> None:
        client = AsyncMock(spec=RemoteJsonClient)
        client.request.return_value = make_release("v1.2.3", draft=True)

        assert await GithubReleaseSource(client, "https://example.org").latest_release() is None
