"""Configuration module for newsai."""

from newsai.config.factory import AppServices, create_from_config, create_provider, create_store
from newsai.config.loader import get_default_config_path, load_config
from newsai.config.models import (
    AggregationConfig,
    AlphaVantageProviderConfig,
    ClaudeConfig,
    DatabaseConfig,
    FinnhubProviderConfig,
    LoggingConfig,
    NewsAIConfig,
    NewsAPIProviderConfig,
    ProviderConfig,
    ScheduleConfig,
)

__all__ = [
    "AggregationConfig",
    "AlphaVantageProviderConfig",
    "AppServices",
    "ClaudeConfig",
    "DatabaseConfig",
    "FinnhubProviderConfig",
    "LoggingConfig",
    "NewsAIConfig",
    "NewsAPIProviderConfig",
    "ProviderConfig",
    "ScheduleConfig",
    "create_from_config",
    "create_provider",
    "create_store",
    "get_default_config_path",
    "load_config",
]
