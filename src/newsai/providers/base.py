from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Protocol

import httpx

from newsai.data import Article, Usage
from newsai.stocks import StockRegistry


class NewsProvider(Protocol):
    """Interface for a single news source."""

    name: str

    async def fetch(self, stocks: StockRegistry) -> tuple[list[Article], Usage]:
        """Fetch recent articles about the tracked instruments.

        Implementations isolate their own request failures: a failed request
        contributes no articles and never raises out of ``fetch``.

        Args:
            stocks: Full tracked-instrument registry.

        Returns:
            Tuple of (canonical articles in provider order, usage).
        """
        ...


@asynccontextmanager
async def client_scope(
    client: httpx.AsyncClient | None, timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a private one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


def parse_iso_datetime(value: object) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when absent or invalid."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def optional_str(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None
