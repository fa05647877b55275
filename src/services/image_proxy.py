"""
Fetches status code images from the upstream cat host and hands
their bodies back as a stream.
"""

import logging
from typing import AsyncIterator, Optional

import httpx

from src.config.settings import settings

logger = logging.getLogger(__name__)


class UpstreamUnavailableError(Exception):
    """The upstream could not be reached or did not answer 200."""


class UpstreamImage:
    """
    An open upstream response. The owner must either exhaust
    `iter_bytes()` or call `aclose()`; both release the connection.
    """

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self._response = response
        self._closed = False

    @property
    def content_type(self) -> Optional[str]:
        return self._response.headers.get("content-type")

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


class StatusImageService:
    """Opens `GET {base_url}/{code}` against the image host."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def open(self, code: int) -> UpstreamImage:
        """
        Starts streaming the image for `code`.
        Raises UpstreamUnavailableError on transport errors or non-200 answers.
        """
        url = f"{self.base_url}/{code}"
        client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

        try:
            response = await client.send(client.build_request("GET", url), stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            logger.warning("Failed to fetch %s: %s", url, e)
            raise UpstreamUnavailableError(url) from e
        except BaseException:
            # cancelled mid-request
            await client.aclose()
            raise

        if response.status_code != httpx.codes.OK:
            await response.aclose()
            await client.aclose()
            logger.warning("Upstream %s answered %d", url, response.status_code)
            raise UpstreamUnavailableError(url)

        return UpstreamImage(client, response)


# Create a singleton for the running app
image_service = StatusImageService(settings.cat_base_url, settings.upstream_timeout)
