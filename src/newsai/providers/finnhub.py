"""Finnhub company-news provider, one request per symbol."""

import asyncio
import logging
import os
from datetime import UTC, date, datetime, timedelta

import httpx

from newsai.data import Article, Usage
from newsai.errors import ProviderFetchError
from newsai.providers.base import client_scope, optional_str
from newsai.stocks import StockRegistry

FINNHUB_URL = "https://finnhub.io/api/v1/company-news"

logger = logging.getLogger(__name__)


class FinnhubProvider:
    """Fetch company news from Finnhub for the first ``max_symbols`` symbols.

    Requests run one after another with ``request_delay`` seconds between
    them to stay under Finnhub's per-minute quota.

    Args:
        api_key: Finnhub token (defaults to FINNHUB_KEY env var).
        client: Shared HTTP client. When omitted a client is opened per fetch.
        max_symbols: Cap on symbols queried per run.
        articles_per_symbol: Articles kept from each symbol's response.
        lookback: How far back to ask for news.
        request_delay: Seconds to wait between requests.
        timeout: Timeout for a privately opened client.
    """

    name = "finnhub"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        max_symbols: int = 20,
        articles_per_symbol: int = 5,
        lookback: timedelta = timedelta(days=1),
        request_delay: float = 0.1,
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("FINNHUB_KEY")
        if not self._api_key:
            raise ValueError("Finnhub key required. Pass api_key or set FINNHUB_KEY env var.")
        self._client = client
        self._max_symbols = max_symbols
        self._articles_per_symbol = articles_per_symbol
        self._lookback = lookback
        self._request_delay = request_delay
        self._timeout = timeout

    async def fetch(self, stocks: StockRegistry) -> tuple[list[Article], Usage]:
        symbols = stocks.symbols[: self._max_symbols]
        now = datetime.now(tz=UTC)
        from_date = (now - self._lookback).date()
        to_date = now.date()

        articles: list[Article] = []
        successful_requests = 0
        async with client_scope(self._client, self._timeout) as client:
            for i, symbol in enumerate(symbols):
                if i > 0 and self._request_delay > 0:
                    await asyncio.sleep(self._request_delay)
                try:
                    articles.extend(await self._fetch_symbol(client, symbol, from_date, to_date))
                    successful_requests += 1
                except ProviderFetchError as e:
                    logger.warning("Finnhub fetch failed for %s: %s", symbol, e)

        return (articles, Usage(finnhub_requests=successful_requests))

    async def _fetch_symbol(
        self,
        client: httpx.AsyncClient,
        symbol: str,
        from_date: date,
        to_date: date,
    ) -> list[Article]:
        params: dict[str, str] = {
            "symbol": symbol,
            "from": from_date.isoformat(),
            "to": to_date.isoformat(),
            "token": self._api_key,  # type: ignore[dict-item]
        }
        try:
            response = await client.get(FINNHUB_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderFetchError(self.name, str(e)) from e
        if not isinstance(data, list):
            raise ProviderFetchError(self.name, f"unexpected payload for {symbol}")

        articles: list[Article] = []
        for item in data[: self._articles_per_symbol]:
            try:
                articles.append(_to_article(item, symbol))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed Finnhub item for %s: %s", symbol, e)
        return articles


def _to_article(item: dict, symbol: str) -> Article:
    summary = item.get("summary") or ""
    return Article(
        title=item.get("headline") or "",
        url=item.get("url") or "",
        source=item.get("source") or "",
        content=summary,
        summary=optional_str(summary),
        image_url=optional_str(item.get("image")),
        published_at=_from_epoch(item.get("datetime")),
        related_symbols=frozenset({symbol}),
    )


def _from_epoch(value: object) -> datetime | None:
    if not isinstance(value, int | float) or value <= 0:
        return None
    try:
        return datetime.fromtimestamp(value, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None
