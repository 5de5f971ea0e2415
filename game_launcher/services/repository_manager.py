"""Aggregates releases from every configured game repository."""

import structlog

from ..models import jenkins
from ..models.config import RepositorySource
from ..models.release import GameIdentifier, GameRelease
from .http_client import HttpClientService
from .jenkins_adapter import LegacyJenkinsRepositoryAdapter
from .remote_client import RemoteJsonClient

log = structlog.stdlib.get_logger()


class RepositoryManager:
    """Owns one adapter per repository source."""

    def __init__(self, adapters: list[LegacyJenkinsRepositoryAdapter]) -> None:
        self.adapters = adapters

    @classmethod
    def from_sources(
        cls,
        sources: list[RepositorySource],
        http_client: HttpClientService,
        build_limit: int = 10,
    ) -> "RepositoryManager":
        client = RemoteJsonClient(http_client, jenkins.ApiResult)
        adapters = [
            LegacyJenkinsRepositoryAdapter(
                source.base_url,
                source.job,
                source.build,
                source.profile,
                client,
                build_limit=build_limit,
            )
            for source in sources
        ]
        return cls(adapters)

    async def fetch_releases(self) -> list[GameRelease]:
        """Fetch all repositories in order, keeping the first release per identifier."""
        seen: set[GameIdentifier] = set()
        releases: list[GameRelease] = []
        for adapter in self.adapters:
            for release in await adapter.fetch_releases():
                if release.id in seen:
                    continue
                seen.add(release.id)
                releases.append(release)

        log.info("Release list assembled", repositories=len(self.adapters), releases=len(releases))
        return releases
