"""Data models for newsai."""

from newsai.data.models import (
    RECOMMENDATION_TTL,
    Action,
    AnalysisOutput,
    AnalysisResult,
    APICallUsage,
    Article,
    EventType,
    HistoricalPattern,
    Impact,
    Priority,
    Recommendation,
    RiskLevel,
    StockImpact,
    StoredArticle,
    Timeframe,
    TrackedStock,
    Usage,
)

__all__ = [
    "RECOMMENDATION_TTL",
    "APICallUsage",
    "Action",
    "AnalysisOutput",
    "AnalysisResult",
    "Article",
    "EventType",
    "HistoricalPattern",
    "Impact",
    "Priority",
    "Recommendation",
    "RiskLevel",
    "StockImpact",
    "StoredArticle",
    "Timeframe",
    "TrackedStock",
    "Usage",
]
