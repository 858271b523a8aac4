"""Core data models for newsai."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any

RECOMMENDATION_TTL = timedelta(days=7)


class EventType(StrEnum):
    """Corporate event category assigned by the analysis."""

    PRODUCT_LAUNCH = "product-launch"
    ACQUISITION = "acquisition"
    LEGAL_ISSUES = "legal-issues"
    EARNINGS = "earnings"
    PARTNERSHIP = "partnership"
    EXECUTIVE_CHANGE = "executive-change"
    MARKET_EXPANSION = "market-expansion"
    OTHER = "other"


class Action(StrEnum):
    """Trading action for a single instrument."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class Timeframe(StrEnum):
    """Horizon over which a recommendation's target change applies."""

    ONE_WEEK = "1_week"
    TWO_WEEKS = "2_weeks"
    ONE_MONTH = "1_month"


class RiskLevel(StrEnum):
    """Risk bucket derived from the number of reported risk factors."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Impact(StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class TrackedStock:
    """An instrument on the watch list."""

    symbol: str
    name: str
    category: str = ""
    priority: Priority = Priority.MEDIUM


@dataclass(frozen=True)
class Article:
    """A news item in canonical form, independent of the provider schema.

    ``url`` is the identity of the article. ``id``, ``created_at`` and
    ``updated_at`` are assigned by the store and are empty on articles that
    come straight from a provider.
    """

    title: str
    url: str
    source: str
    content: str = ""
    summary: str | None = None
    author: str | None = None
    image_url: str | None = None
    published_at: datetime | None = None
    related_symbols: frozenset[str] = frozenset()
    id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class StoredArticle:
    """Identity of an article row after an upsert."""

    id: uuid.UUID
    url: str


@dataclass(frozen=True)
class StockImpact:
    """Per-instrument entry of an analysis response."""

    symbol: str
    recommendation: Action
    impact: Impact = Impact.NEUTRAL
    rationale: str = ""
    target_change: float = 0.0
    timeframe: Timeframe = Timeframe.ONE_WEEK


@dataclass(frozen=True)
class AnalysisOutput:
    """Structured assessment extracted from an AI response."""

    event_type: EventType
    sentiment_score: float
    confidence_score: float
    affected_stocks: tuple[StockImpact, ...] = ()
    key_insights: tuple[str, ...] = ()
    risk_factors: tuple[str, ...] = ()
    historical_context: str = ""
    overall_assessment: str = ""

    @property
    def primary_action(self) -> Action:
        """Action of the first affected stock, HOLD when there is none."""
        if not self.affected_stocks:
            return Action.HOLD
        return self.affected_stocks[0].recommendation


@dataclass(frozen=True)
class AnalysisResult:
    """A persisted analysis of one article.

    ``recommendation`` duplicates the first affected stock's action for
    convenience; the Recommendation rows remain the source of truth.
    """

    article_id: uuid.UUID
    event_type: EventType
    sentiment_score: float
    confidence_score: float
    recommendation: Action
    rationale: str
    risk_factors: tuple[str, ...]
    historical_context: str
    key_insights: tuple[str, ...]
    analyzed_at: datetime
    model_version: str
    id: uuid.UUID | None = None


@dataclass(frozen=True)
class Recommendation:
    """A time-bounded trading signal for one instrument."""

    analysis_id: uuid.UUID
    symbol: str
    name: str | None
    action: Action
    confidence: float
    target_change: float
    timeframe: Timeframe
    reasoning: str
    risk_level: RiskLevel
    created_at: datetime
    expires_at: datetime
    is_active: bool = True
    id: uuid.UUID | None = None

    def is_live(self, now: datetime) -> bool:
        return self.is_active and self.expires_at > now


@dataclass(frozen=True)
class HistoricalPattern:
    """Precomputed price reaction statistics for (symbol, event type, timeframe)."""

    symbol: str
    event_type: str
    timeframe: str
    avg_price_change: float
    median_price_change: float | None = None
    sample_size: int = 0
    confidence: float = 0.0
    data_points: list[Any] = field(default_factory=list)
    last_updated: datetime | None = None


@dataclass(frozen=True)
class APICallUsage:
    """Usage from a single AI call."""

    model: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class Usage:
    """Accumulated API usage across pipeline components."""

    api_calls: list[APICallUsage] = field(default_factory=list)
    newsapi_requests: int = 0
    finnhub_requests: int = 0
    alphavantage_requests: int = 0

    @property
    def input_tokens(self) -> int:
        return sum(c.input_tokens for c in self.api_calls)

    @property
    def output_tokens(self) -> int:
        return sum(c.output_tokens for c in self.api_calls)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def provider_requests(self) -> int:
        return self.newsapi_requests + self.finnhub_requests + self.alphavantage_requests

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            api_calls=self.api_calls + other.api_calls,
            newsapi_requests=self.newsapi_requests + other.newsapi_requests,
            finnhub_requests=self.finnhub_requests + other.finnhub_requests,
            alphavantage_requests=self.alphavantage_requests + other.alphavantage_requests,
        )

    def __iadd__(self, other: "Usage") -> "Usage":
        self.api_calls.extend(other.api_calls)
        self.newsapi_requests += other.newsapi_requests
        self.finnhub_requests += other.finnhub_requests
        self.alphavantage_requests += other.alphavantage_requests
        return self
