"""Repository adapter turning Jenkins job builds into game releases."""

import structlog

from ..models import jenkins
from ..models.release import (
    Build,
    GameIdentifier,
    GameRelease,
    Profile,
    ReleaseMetadata,
    datetime_from_millis,
)
from .remote_client import RemoteJsonClient

log = structlog.stdlib.get_logger()

API_TREE = "builds[number,url,timestamp,result,artifacts[fileName,relativePath]]"


class LegacyJenkinsRepositoryAdapter:
    """Fetches the most recent builds of one Jenkins job.

    Channel and profile are fixed per adapter instance. Builds are returned
    in the order Jenkins lists them (most recent first); incomplete builds are
    skipped without affecting their neighbours. The upstream ``result`` field
    is not evaluated: every listed build is treated as successful.
    """

    def __init__(
        self,
        base_url: str,
        job: str,
        build: Build,
        profile: Profile,
        client: RemoteJsonClient[jenkins.ApiResult],
        build_limit: int = 10,
    ) -> None:
        self.build = build
        self.profile = profile
        self.client = client
        self.api_url = f"{base_url.rstrip('/')}/job/{job}/api/json?tree={API_TREE}{{0,{build_limit}}}"

    async def fetch_releases(self) -> list[GameRelease]:
        log.debug("Fetching releases", url=self.api_url)
        result = await self.client.request(self.api_url)
        if result is None:
            log.warning("Failed to fetch releases", url=self.api_url)
            return []
        if not result.builds:
            log.info("No builds listed", url=self.api_url)
            return []

        releases = [
            release
            for release in (self._compute_release(b) for b in result.builds)
            if release is not None
        ]
        log.info(
            "Releases fetched",
            url=self.api_url,
            builds=len(result.builds),
            releases=len(releases),
        )
        return releases

    def _compute_release(self, build: jenkins.Build | None) -> GameRelease | None:
        if build is None:
            log.debug("Skipping null build entry")
            return None
        if build.number is None:
            log.debug("Skipping build without number", build_url=build.url)
            return None
        if build.url is None:
            log.debug("Skipping build without url", build_number=build.number)
            return None
        artifact = build.artifacts[0] if build.artifacts else None
        if artifact is None or artifact.relative_path is None:
            log.debug("Skipping build without artifact", build_number=build.number)
            return None
        if build.timestamp is None:
            log.debug("Skipping build without timestamp", build_number=build.number)
            return None

        url = f"{build.url}artifact/{artifact.relative_path}"
        try:
            return GameRelease(
                id=GameIdentifier(build.number, self.build, self.profile),
                url=url,
                metadata=ReleaseMetadata(
                    changelog=(),
                    timestamp=datetime_from_millis(build.timestamp),
                    is_success=True,
                ),
            )
        except ValueError as e:
            log.debug("Skipping malformed build", build_number=build.number, url=url, error=str(e))
            return None
