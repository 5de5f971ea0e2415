"""HTTP client service with timeouts and optional retry logic."""

import asyncio
from pathlib import Path
from typing import Any

import httpx
import structlog

from .. import __version__

log = structlog.stdlib.get_logger()


class HttpClientService:
    """HTTP client service with timeout handling and exponential backoff retries.

    Retries are off by default; callers that want them opt in through
    ``max_retries``.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_retries: int = 0,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            timeout: Connect/read timeout in seconds
            max_retries: Maximum number of retry attempts after the first request
            base_delay: Base delay for exponential backoff in seconds
            max_delay: Maximum delay between retries in seconds
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": f"GameLauncher/{__version__}"},
            follow_redirects=True,
        )

        log.info(
            "HTTP client service initialized",
            timeout=timeout,
            max_retries=max_retries,
        )

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a GET request, retrying transient failures.

        Args:
            url: The URL to request
            headers: Optional additional headers

        Returns:
            HTTP response object

        Raises:
            httpx.HTTPError: If all attempts fail
        """
        for attempt in range(self.max_retries + 1):
            try:
                log.debug("Making HTTP GET request", url=url, attempt=attempt + 1)

                response = await self._client.get(url, headers=headers)
                response.raise_for_status()

                log.debug(
                    "HTTP GET request successful",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.content),
                )
                return response

            except httpx.HTTPError as e:
                log.warning(
                    "HTTP GET request failed",
                    url=url,
                    attempt=attempt + 1,
                    error=str(e),
                    error_type=type(e).__name__,
                )

                # Client errors will not go away by retrying
                if isinstance(e, httpx.HTTPStatusError) and 400 <= e.response.status_code < 500:
                    raise

                if attempt == self.max_retries:
                    raise

                delay = min(self.base_delay * (2 ** attempt), self.max_delay)
                log.info("Retrying after delay", delay=delay)
                await asyncio.sleep(delay)

        raise RuntimeError("Unexpected end of retry loop")

    async def download_file(
        self,
        url: str,
        path: Path,
        chunk_size: int = 65536,
    ) -> int:
        """Stream a file to disk.

        A partially written file is removed when the download fails.

        Args:
            url: The URL to download from
            path: Local path to save the file
            chunk_size: Size of chunks to read/write in bytes

        Returns:
            Number of bytes written

        Raises:
            httpx.HTTPError: If the download fails or is truncated
            OSError: If the file cannot be written
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        log.info("Starting file download", url=url, path=str(path))

        try:
            async with self._client.stream("GET", url) as response:
                response.raise_for_status()
                total_size = int(response.headers.get("content-length", 0))
                downloaded = 0

                with open(path, "wb") as f:
                    async for chunk in response.aiter_bytes(chunk_size):
                        f.write(chunk)
                        downloaded += len(chunk)

            if total_size > 0 and downloaded != total_size:
                raise httpx.RequestError(
                    f"File size mismatch: expected {total_size}, got {downloaded}"
                )

        except (httpx.HTTPError, OSError) as e:
            log.warning(
                "File download failed",
                url=url,
                path=str(path),
                error=str(e),
                error_type=type(e).__name__,
            )
            if path.exists():
                try:
                    path.unlink()
                except OSError:
                    log.warning("Failed to clean up partial download", path=str(path))
            raise

        log.info("File download completed", url=url, path=str(path), size=downloaded)
        return downloaded

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClientService":
        return self

    async def __aexit__(self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: Any) -> None:
        await self.close()
