"""Pydantic configuration models for newsai components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

# ============================================================
# Store Config
# ============================================================


class DatabaseConfig(BaseModel):
    """Configuration for the SQL store.

    ``url`` falls back to the DATABASE_URL env var when unset.
    """

    url: str | None = None
    pool_size: int = 20
    checkout_warning_seconds: float = 5.0
    echo: bool = False

    model_config = {"frozen": True}


# ============================================================
# AI Config
# ============================================================


class ClaudeConfig(BaseModel):
    """Configuration for ClaudeCompletionClient."""

    model: str = "claude-3-5-haiku-20241022"
    max_tokens: int = 2000
    temperature: float = 0.3

    model_config = {"frozen": True}


# ============================================================
# Provider Configs
# ============================================================


class NewsAPIProviderConfig(BaseModel):
    """Configuration for NewsAPIProvider."""

    type: Literal["newsapi"] = "newsapi"
    page_size: int = Field(default=50, ge=1, le=100)
    domains: str = "reuters.com,bloomberg.com,cnbc.com,wsj.com,ft.com"

    model_config = {"frozen": True}


class FinnhubProviderConfig(BaseModel):
    """Configuration for FinnhubProvider."""

    type: Literal["finnhub"] = "finnhub"
    max_symbols: int = 20
    articles_per_symbol: int = 5
    lookback_days: int = 1
    request_delay: float = 0.1

    model_config = {"frozen": True}


class AlphaVantageProviderConfig(BaseModel):
    """Configuration for AlphaVantageProvider."""

    type: Literal["alphavantage"] = "alphavantage"
    max_symbols: int = 5
    limit: int = 10
    request_delay: float = 15.0

    model_config = {"frozen": True}


ProviderConfig = Annotated[
    NewsAPIProviderConfig | FinnhubProviderConfig | AlphaVantageProviderConfig,
    Field(discriminator="type"),
]


def _default_providers() -> list[ProviderConfig]:
    return [NewsAPIProviderConfig(), FinnhubProviderConfig(), AlphaVantageProviderConfig()]


# ============================================================
# Aggregation Config
# ============================================================


class AggregationConfig(BaseModel):
    """Configuration for NewsAggregator and its analysis queue."""

    analysis_workers: int = Field(default=2, ge=1)
    queue_capacity: int = Field(default=100, ge=1)
    join_timeout_seconds: float | None = 120.0
    http_timeout_seconds: float = 30.0

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for process logging and per-run JSON records."""

    level: str = "INFO"
    log_dir: str | None = "logs"
    run_log: bool = False
    run_log_dir: str = "logs/runs"

    model_config = {"frozen": True}


# ============================================================
# Schedule Config
# ============================================================


class ScheduleConfig(BaseModel):
    """Cron expressions for the external scheduler that invokes ``run``."""

    morning: str = "0 9 * * *"
    evening: str = "0 18 * * *"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class NewsAIConfig(BaseModel):
    """Root configuration for newsai."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    claude: ClaudeConfig = Field(default_factory=ClaudeConfig)
    providers: list[ProviderConfig] = Field(default_factory=_default_providers)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)

    model_config = {"frozen": True}
