"""Best-effort JSON client for remote build and release APIs."""

from typing import Generic, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from .http_client import HttpClientService

log = structlog.stdlib.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


class RemoteJsonClient(Generic[ModelT]):
    """Fetches a JSON document and validates it into ``model``.

    ``request`` never raises: connection failures, timeouts, HTTP errors,
    malformed JSON and JSON of the wrong shape all come back as ``None``.
    Retries, if any, are the transport's business.
    """

    def __init__(self, http_client: HttpClientService, model: type[ModelT]) -> None:
        self.http_client = http_client
        self.model = model

    async def request(self, url: str) -> ModelT | None:
        try:
            response = await self.http_client.get(url)
            return self.model.model_validate_json(response.content)
        except (httpx.HTTPError, OSError, ValueError) as e:
            # pydantic.ValidationError is a ValueError
            log.warning(
                "Remote request failed",
                url=url,
                model=self.model.__name__,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
