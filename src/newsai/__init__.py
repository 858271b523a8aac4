"""newsai: financial news aggregation with AI-generated trading signals."""

from newsai.analysis import (
    AnalysisOutcome,
    ArticleAnalyzer,
    BulkAnalysisResult,
    RecommendationSynthesizer,
    build_analysis_prompt,
    lookup_historical_patterns,
    parse_analysis_response,
    risk_level_for,
)
from newsai.completion import ClaudeCompletionClient, CompletionClient
from newsai.config import AppServices, NewsAIConfig, create_from_config, load_config
from newsai.data import (
    Action,
    AnalysisOutput,
    AnalysisResult,
    APICallUsage,
    Article,
    EventType,
    HistoricalPattern,
    Recommendation,
    RiskLevel,
    StockImpact,
    Timeframe,
    TrackedStock,
    Usage,
)
from newsai.dedup import deduplicate_articles
from newsai.errors import (
    ArticleNotFound,
    BatchAggregationError,
    MalformedAnalysis,
    NewsAIError,
    PersistenceError,
    ProviderFetchError,
)
from newsai.impact import IMPACT_KEYWORDS, filter_high_impact, is_high_impact
from newsai.pipeline import AggregationSummary, AnalysisJob, AnalysisQueue, NewsAggregator
from newsai.providers import AlphaVantageProvider, FinnhubProvider, NewsAPIProvider, NewsProvider
from newsai.run_logger import RunLogger
from newsai.stocks import DEFAULT_STOCKS, StockRegistry
from newsai.store import NewsStore, SQLNewsStore
from newsai.tagger import tag_symbols

__all__ = [
    # Models
    "APICallUsage",
    "Action",
    "AnalysisOutput",
    "AnalysisResult",
    "Article",
    "EventType",
    "HistoricalPattern",
    "Recommendation",
    "RiskLevel",
    "StockImpact",
    "Timeframe",
    "TrackedStock",
    "Usage",
    # Errors
    "ArticleNotFound",
    "BatchAggregationError",
    "MalformedAnalysis",
    "NewsAIError",
    "PersistenceError",
    "ProviderFetchError",
    # Tracked instruments
    "DEFAULT_STOCKS",
    "StockRegistry",
    # Functions
    "IMPACT_KEYWORDS",
    "build_analysis_prompt",
    "deduplicate_articles",
    "filter_high_impact",
    "is_high_impact",
    "lookup_historical_patterns",
    "parse_analysis_response",
    "risk_level_for",
    "tag_symbols",
    # Protocols
    "CompletionClient",
    "NewsProvider",
    "NewsStore",
    # Providers
    "AlphaVantageProvider",
    "FinnhubProvider",
    "NewsAPIProvider",
    # Store
    "SQLNewsStore",
    # AI
    "ClaudeCompletionClient",
    # Analysis
    "AnalysisOutcome",
    "ArticleAnalyzer",
    "BulkAnalysisResult",
    "RecommendationSynthesizer",
    # Pipeline
    "AggregationSummary",
    "AnalysisJob",
    "AnalysisQueue",
    "NewsAggregator",
    # Logging
    "RunLogger",
    # Config
    "AppServices",
    "NewsAIConfig",
    "create_from_config",
    "load_config",
]
