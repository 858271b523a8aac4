"""Factory functions to create components from configuration."""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import httpx

from newsai.analysis.analyzer import ArticleAnalyzer
from newsai.completion.claude import ClaudeCompletionClient
from newsai.config.models import (
    AlphaVantageProviderConfig,
    DatabaseConfig,
    FinnhubProviderConfig,
    NewsAIConfig,
    NewsAPIProviderConfig,
    ProviderConfig,
)
from newsai.pipeline.aggregator import NewsAggregator
from newsai.providers.alphavantage import AlphaVantageProvider
from newsai.providers.base import NewsProvider
from newsai.providers.finnhub import FinnhubProvider
from newsai.providers.newsapi import NewsAPIProvider
from newsai.run_logger import RunLogger
from newsai.stocks import StockRegistry
from newsai.store.sql import SQLNewsStore

logger = logging.getLogger(__name__)


def create_provider(config: ProviderConfig, client: httpx.AsyncClient | None = None) -> NewsProvider:
    """Create a news provider from config.

    Uses explicit type matching rather than getattr.
    """
    if isinstance(config, NewsAPIProviderConfig):
        return NewsAPIProvider(client=client, page_size=config.page_size, domains=config.domains)
    if isinstance(config, FinnhubProviderConfig):
        return FinnhubProvider(
            client=client,
            max_symbols=config.max_symbols,
            articles_per_symbol=config.articles_per_symbol,
            lookback=timedelta(days=config.lookback_days),
            request_delay=config.request_delay,
        )
    if isinstance(config, AlphaVantageProviderConfig):
        return AlphaVantageProvider(
            client=client,
            max_symbols=config.max_symbols,
            limit=config.limit,
            request_delay=config.request_delay,
        )
    msg = f"Unknown provider config type: {type(config)}"
    raise ValueError(msg)


def create_store(config: DatabaseConfig) -> SQLNewsStore:
    """Create the SQL store from config, falling back to DATABASE_URL."""
    url = config.url or os.environ.get("DATABASE_URL")
    if not url:
        raise ValueError("Database URL required. Set database.url or DATABASE_URL env var.")
    return SQLNewsStore.from_url(
        url,
        pool_size=config.pool_size,
        echo=config.echo,
        checkout_warning_seconds=config.checkout_warning_seconds,
    )


@dataclass
class AppServices:
    """Everything a command needs, with a single shutdown path."""

    store: SQLNewsStore
    completion: ClaudeCompletionClient
    http_client: httpx.AsyncClient
    aggregator: NewsAggregator
    run_logger: RunLogger | None = None

    async def aclose(self) -> None:
        """Drain analyses, then release the HTTP, AI and database clients."""
        try:
            await self.aggregator.close()
        finally:
            await self.http_client.aclose()
            await self.completion.close()
            await self.store.close()

    async def __aenter__(self) -> "AppServices":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_from_config(
    config: NewsAIConfig,
    *,
    stocks: StockRegistry | None = None,
    run_log_override: bool | None = None,
) -> AppServices:
    """Create the full service graph from root config.

    API keys are read from the environment by each client.

    Args:
        config: Root configuration.
        stocks: Tracked-instrument registry. Defaults to the built-in list.
        run_log_override: Override the config's logging.run_log setting.

    Returns:
        AppServices bundle. The caller must ``await services.aclose()``.
    """
    stocks = stocks or StockRegistry()
    run_log = run_log_override if run_log_override is not None else config.logging.run_log

    run_logger: RunLogger | None = None
    if run_log:
        run_logger = RunLogger(log_dir=Path(config.logging.run_log_dir), enabled=True)

    store = create_store(config.database)
    http_client = httpx.AsyncClient(timeout=config.aggregation.http_timeout_seconds)
    completion = ClaudeCompletionClient(
        model=config.claude.model,
        max_tokens=config.claude.max_tokens,
        temperature=config.claude.temperature,
    )
    providers = [create_provider(p, http_client) for p in config.providers]
    analyzer = ArticleAnalyzer(completion, store, stocks)
    aggregator = NewsAggregator(
        providers,
        store,
        analyzer,
        stocks,
        analysis_workers=config.aggregation.analysis_workers,
        queue_capacity=config.aggregation.queue_capacity,
        join_timeout=config.aggregation.join_timeout_seconds,
        run_logger=run_logger,
    )
    logger.debug(
        "Created services with providers: %s", ", ".join(p.name for p in providers)
    )
    return AppServices(
        store=store,
        completion=completion,
        http_client=http_client,
        aggregator=aggregator,
        run_logger=run_logger,
    )
