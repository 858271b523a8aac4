"""NewsAPI.org provider using a keyword union of tracked symbols."""

import logging
import os

import httpx

from newsai.data import Article, Usage
from newsai.errors import ProviderFetchError
from newsai.providers.base import client_scope, optional_str, parse_iso_datetime
from newsai.stocks import StockRegistry
from newsai.tagger import tag_symbols

NEWSAPI_URL = "https://newsapi.org/v2/everything"
DEFAULT_DOMAINS = "reuters.com,bloomberg.com,cnbc.com,wsj.com,ft.com"

logger = logging.getLogger(__name__)


class NewsAPIProvider:
    """Fetch articles from the NewsAPI ``everything`` endpoint.

    A single request covers all tracked symbols (``AAPL OR MSFT OR ...``).
    NewsAPI does not tag instruments, so related symbols are found with
    :func:`newsai.tagger.tag_symbols` over title and description.

    Args:
        api_key: NewsAPI key (defaults to NEWSAPI_KEY env var).
        client: Shared HTTP client. When omitted a client is opened per fetch.
        page_size: Articles per request (NewsAPI max is 100).
        domains: Comma-separated domain allow-list.
        timeout: Timeout for a privately opened client.
    """

    name = "newsapi"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        page_size: int = 50,
        domains: str = DEFAULT_DOMAINS,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("NEWSAPI_KEY")
        if not self._api_key:
            raise ValueError("NewsAPI key required. Pass api_key or set NEWSAPI_KEY env var.")
        self._client = client
        self._page_size = min(page_size, 100)
        self._domains = domains
        self._timeout = timeout

    async def fetch(self, stocks: StockRegistry) -> tuple[list[Article], Usage]:
        if not len(stocks):
            return ([], Usage())
        try:
            async with client_scope(self._client, self._timeout) as client:
                articles = await self._fetch_all(client, stocks)
        except ProviderFetchError as e:
            logger.error("NewsAPI fetch error: %s", e)
            return ([], Usage())
        return (articles, Usage(newsapi_requests=1))

    async def _fetch_all(self, client: httpx.AsyncClient, stocks: StockRegistry) -> list[Article]:
        params: dict[str, str | int] = {
            "q": " OR ".join(stocks.symbols),
            "language": "en",
            "sortBy": "publishedAt",
            "pageSize": self._page_size,
            "domains": self._domains,
            "apiKey": self._api_key,  # type: ignore[dict-item]
        }
        try:
            response = await client.get(NEWSAPI_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderFetchError(self.name, str(e)) from e
        items = (data.get("articles") or []) if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ProviderFetchError(self.name, "unexpected payload")

        articles: list[Article] = []
        for item in items:
            try:
                articles.append(_to_article(item, stocks))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed NewsAPI item: %s", e)
        return articles


def _to_article(item: dict, stocks: StockRegistry) -> Article:
    title = item.get("title") or ""
    description = item.get("description") or ""
    source = item.get("source")
    return Article(
        title=title,
        url=item.get("url") or "",
        source=(source.get("name") if isinstance(source, dict) else optional_str(source)) or "",
        content=description or item.get("content") or "",
        summary=optional_str(description),
        author=optional_str(item.get("author")),
        image_url=optional_str(item.get("urlToImage")),
        published_at=parse_iso_datetime(item.get("publishedAt")),
        related_symbols=tag_symbols(f"{title} {description}", stocks),
    )
