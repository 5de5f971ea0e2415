"""Tests for the best-effort remote JSON client."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest
from hypothesis import given, settings, strategies as st

from game_launcher.models import GithubRelease
from game_launcher.models.jenkins import ApiResult
from game_launcher.services.http_client import HttpClientService
from game_launcher.services.remote_client import RemoteJsonClient

URL = "http://jenkins.example.org/job/DistroOmega/api/json"


def json_response(body: bytes | str, status_code: int = 200) -> httpx.Response:
    content = body.encode() if isinstance(body, str) else body
    return httpx.Response(status_code, content=content, request=httpx.Request("GET", URL))


def make_client(**get_kwargs: object) -> tuple[RemoteJsonClient[ApiResult], AsyncMock]:
    http_client = AsyncMock(spec=HttpClientService)
    for key, value in get_kwargs.items():
        setattr(http_client.get, key, value)
    return RemoteJsonClient(http_client, ApiResult), http_client


class TestNetworkFailures:
    """Any failure while fetching comes back as None."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        httpx.ConnectError("connection refused"),
        httpx.ReadTimeout("timed out"),
        httpx.RemoteProtocolError("peer closed connection"),
        httpx.HTTPStatusError(
            "server error",
            request=httpx.Request("GET", URL),
            response=httpx.Response(503),
        ),
        OSError("stream closed"),
        ConnectionResetError("reset by peer"),
    ])
    async def test_io_failure_returns_none(self, error: Exception) -> None:
        client, http_client = make_client(side_effect=error)

        assert await client.request(URL) is None
        http_client.get.assert_awaited_once_with(URL)


class TestDecodeFailures:
    """Bodies that are not the expected JSON come back as None."""

    @pytest.mark.asyncio
    async def test_invalid_json_returns_none(self) -> None:
        client, _ = make_client(return_value=json_response("{ this is ] no json |[!"))
        assert await client.request(URL) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        "[]",
        "null",
        '"builds"',
        '{"builds": "not a list"}',
        '{"builds": [{"number": "twelve"}]}',
        '{"builds": [{"artifacts": {"relativePath": "a.zip"}}]}',
    ])
    async def test_wrong_shape_returns_none(self, body: str) -> None:
        client, _ = make_client(return_value=json_response(body))
        assert await client.request(URL) is None

    @given(st.binary(max_size=200))
    @settings(deadline=None, max_examples=50)
    def test_arbitrary_bytes_never_raise(self, body: bytes) -> None:
        client, _ = make_client(return_value=json_response(body))
        result = asyncio.run(client.request(URL))
        assert result is None or isinstance(result, ApiResult)


class TestSuccessfulDecode:
    """Valid documents are decoded into the target model."""

    @pytest.mark.asyncio
    async def test_decodes_jenkins_payload(self) -> None:
        body = '{"builds": [{"number": 3, "url": "http://x/3/", "timestamp": 5, "artifacts": [{"relativePath": "a.zip"}]}]}'
        client, _ = make_client(return_value=json_response(body))

        result = await client.request(URL)

        assert result is not None
        assert result.builds is not None
        assert result.builds[0].number == 3
        assert result.builds[0].artifacts is not None
        assert result.builds[0].artifacts[0].relative_path == "a.zip"

    @pytest.mark.asyncio
    async def test_unknown_fields_are_ignored(self) -> None:
        body = '{"_class": "hudson.model.FreeStyleProject", "builds": []}'
        client, _ = make_client(return_value=json_response(body))

        result = await client.request(URL)

        assert result == ApiResult(builds=[])

    @pytest.mark.asyncio
    async def test_same_client_decodes_other_models(self) -> None:
        http_client = AsyncMock(spec=HttpClientService)
        http_client.get.return_value = json_response('{"tag_name": "v1.2.3", "body": "Fixes"}')
        client = RemoteJsonClient(http_client, GithubRelease)

        release = await client.request("https://api.github.com/repos/o/r/releases/latest")

        assert release is not None
        assert str(release.version) == "1.2.3"
        assert release.changelog == "Fixes"
