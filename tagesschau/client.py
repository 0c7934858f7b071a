import logging

import httpx

from tagesschau.content import (
    Articles,
    Content,
    TextArticle,
    Video,
    decode_articles,
    sort_by_date,
    text_only,
    video_only,
)
from tagesschau.errors import BodyReadError, InvalidResponse, RequestFailed
from tagesschau.models import RequestConfig, build_config, resolve_dates
from tagesschau.urls import BASE_URL, prepare_url

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 30.0


def _check_status(response: httpx.Response) -> None:
    if response.status_code != httpx.codes.OK:
        raise InvalidResponse(response.status_code)


def fetch_articles(client: httpx.Client, url: str) -> Articles:
    """GET one prepared URL and decode the body. The body is only read on 200."""
    logger.debug("GET %s", url)
    try:
        with client.stream("GET", url) as response:
            _check_status(response)
            try:
                response.read()
            except httpx.HTTPError as exc:
                raise BodyReadError(f"Failed to read response body from {url}") from exc
            body = response.text
    except httpx.HTTPError as exc:
        raise RequestFailed(f"Fetching articles failed: {url}") from exc
    return decode_articles(body)


async def afetch_articles(client: httpx.AsyncClient, url: str) -> Articles:
    """Async counterpart of ``fetch_articles``."""
    logger.debug("GET %s", url)
    try:
        async with client.stream("GET", url) as response:
            _check_status(response)
            try:
                await response.aread()
            except httpx.HTTPError as exc:
                raise BodyReadError(f"Failed to read response body from {url}") from exc
            body = response.text
    except httpx.HTTPError as exc:
        raise RequestFailed(f"Fetching articles failed: {url}") from exc
    return decode_articles(body)


class _BaseClient:
    def __init__(
        self,
        config: RequestConfig | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = HTTP_TIMEOUT,
    ) -> None:
        self.config = config or build_config()
        self.base_url = base_url
        self.timeout = timeout

    def prepare_urls(self) -> list[str]:
        """One request URL per date of the configured timeframe."""
        return [
            prepare_url(date, self.config, self.base_url)
            for date in resolve_dates(self.config.timeframe)
        ]

    def _finish(self, content: list[Content]) -> list[Content]:
        logger.info("Fetched %d items in total", len(content))
        if self.config.sort_by_date:
            return sort_by_date(content)
        return content


class TagesschauClient(_BaseClient):
    """Blocking client. Requests run one after another; the first error aborts."""

    def __init__(
        self,
        config: RequestConfig | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(config, base_url=base_url, timeout=timeout)
        self._client = client

    def _collect(self, client: httpx.Client, urls: list[str]) -> list[Content]:
        content: list[Content] = []
        for url in urls:
            articles = fetch_articles(client, url)
            logger.info("Fetched %d items from %s", len(articles.news), url)
            content.extend(articles.news)
        return content

    def get_all_articles(self) -> list[Content]:
        urls = self.prepare_urls()
        if self._client is not None:
            return self._finish(self._collect(self._client, urls))
        with httpx.Client(timeout=self.timeout) as client:
            return self._finish(self._collect(client, urls))

    def get_text_articles(self) -> list[TextArticle]:
        return text_only(self.get_all_articles())

    def get_video_articles(self) -> list[Video]:
        return video_only(self.get_all_articles())


class AsyncTagesschauClient(_BaseClient):
    """Async client. Each request is awaited before the next one starts."""

    def __init__(
        self,
        config: RequestConfig | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config, base_url=base_url, timeout=timeout)
        self._client = client

    async def _collect(self, client: httpx.AsyncClient, urls: list[str]) -> list[Content]:
        content: list[Content] = []
        for url in urls:
            articles = await afetch_articles(client, url)
            logger.info("Fetched %d items from %s", len(articles.news), url)
            content.extend(articles.news)
        return content

    async def get_all_articles(self) -> list[Content]:
        urls = self.prepare_urls()
        if self._client is not None:
            return self._finish(await self._collect(self._client, urls))
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return self._finish(await self._collect(client, urls))

    async def get_text_articles(self) -> list[TextArticle]:
        return text_only(await self.get_all_articles())

    async def get_video_articles(self) -> list[Video]:
        return video_only(await self.get_all_articles())
