"""Alpha Vantage NEWS_SENTIMENT provider.

The free tier allows only a handful of calls per day, so this provider
queries just the first few tracked symbols and waits a long time between
requests.
"""

import asyncio
import logging
import os
from datetime import UTC, datetime

import httpx

from newsai.data import Article, Usage
from newsai.errors import ProviderFetchError
from newsai.providers.base import client_scope, optional_str
from newsai.stocks import StockRegistry

ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"
TIME_PUBLISHED_FORMAT = "%Y%m%dT%H%M%S"

logger = logging.getLogger(__name__)


class AlphaVantageProvider:
    """Fetch news and ticker tags from Alpha Vantage.

    Args:
        api_key: Alpha Vantage key (defaults to ALPHAVANTAGE_KEY env var).
        client: Shared HTTP client. When omitted a client is opened per fetch.
        max_symbols: Cap on symbols queried per run.
        limit: Result-count limit sent with each request.
        request_delay: Seconds to wait between requests.
        timeout: Timeout for a privately opened client.
    """

    name = "alphavantage"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        max_symbols: int = 5,
        limit: int = 10,
        request_delay: float = 15.0,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("ALPHAVANTAGE_KEY")
        if not self._api_key:
            raise ValueError(
                "Alpha Vantage key required. Pass api_key or set ALPHAVANTAGE_KEY env var."
            )
        self._client = client
        self._max_symbols = max_symbols
        self._limit = limit
        self._request_delay = request_delay
        self._timeout = timeout

    async def fetch(self, stocks: StockRegistry) -> tuple[list[Article], Usage]:
        symbols = stocks.symbols[: self._max_symbols]

        articles: list[Article] = []
        successful_requests = 0
        async with client_scope(self._client, self._timeout) as client:
            for i, symbol in enumerate(symbols):
                if i > 0 and self._request_delay > 0:
                    await asyncio.sleep(self._request_delay)
                try:
                    articles.extend(await self._fetch_symbol(client, symbol))
                    successful_requests += 1
                except ProviderFetchError as e:
                    logger.warning("Alpha Vantage fetch failed for %s: %s", symbol, e)

        return (articles, Usage(alphavantage_requests=successful_requests))

    async def _fetch_symbol(self, client: httpx.AsyncClient, symbol: str) -> list[Article]:
        params: dict[str, str | int] = {
            "function": "NEWS_SENTIMENT",
            "tickers": symbol,
            "apikey": self._api_key,  # type: ignore[dict-item]
            "limit": self._limit,
        }
        try:
            response = await client.get(ALPHAVANTAGE_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderFetchError(self.name, str(e)) from e

        # Quota and key errors come back as 200 with a message instead of a feed
        if not isinstance(data, dict):
            raise ProviderFetchError(self.name, f"unexpected payload for {symbol}")
        if "feed" not in data:
            message = data.get("Note") or data.get("Information") or data.get("Error Message")
            if message:
                raise ProviderFetchError(self.name, str(message))
            return []

        feed = data["feed"] or []
        if not isinstance(feed, list):
            raise ProviderFetchError(self.name, f"unexpected feed for {symbol}")

        articles: list[Article] = []
        for item in feed:
            try:
                articles.append(_to_article(item, symbol))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed Alpha Vantage item for %s: %s", symbol, e)
        return articles


def _to_article(item: dict, symbol: str) -> Article:
    summary = item.get("summary") or ""
    tickers = frozenset(
        t["ticker"] for t in item.get("ticker_sentiment") or [] if t.get("ticker")
    )
    return Article(
        title=item.get("title") or "",
        url=item.get("url") or "",
        source=item.get("source") or "",
        content=summary,
        summary=optional_str(summary),
        author=_join_authors(item.get("authors")),
        image_url=optional_str(item.get("banner_image")),
        published_at=_parse_time_published(item.get("time_published")),
        related_symbols=tickers or frozenset({symbol}),
    )


def _parse_time_published(value: object) -> datetime | None:
    """Parse Alpha Vantage's compact ``20240115T133000`` timestamps (UTC)."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.strptime(value, TIME_PUBLISHED_FORMAT).replace(tzinfo=UTC)
    except ValueError:
        return None


def _join_authors(value: object) -> str | None:
    if isinstance(value, list) and value:
        return ", ".join(str(a) for a in value if a) or None
    return optional_str(value)
