"""Shared fixtures: an in-memory store, a mocked completion client and sample data."""

import uuid
from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from newsai.data import (
    AnalysisResult,
    APICallUsage,
    Article,
    HistoricalPattern,
    Recommendation,
    StoredArticle,
    TrackedStock,
    Usage,
)
from newsai.errors import PersistenceError
from newsai.stocks import StockRegistry


class InMemoryStore:
    """NewsStore backed by dicts, with switches for injecting failures."""

    def __init__(self) -> None:
        self.articles: dict[uuid.UUID, Article] = {}
        self.analyses: list[AnalysisResult] = []
        self.recommendations: list[Recommendation] = []
        self.patterns: dict[tuple[str, str], HistoricalPattern] = {}
        self.pattern_lookups: list[tuple[str, str]] = []
        self.fail_urls: set[str] = set()
        self.fail_analysis = False
        self.fail_recommendation_symbols: set[str] = set()
        self.fail_pattern_lookup = False

    async def upsert_article(self, article: Article) -> StoredArticle:
        if article.url in self.fail_urls:
            raise PersistenceError(f"Failed to save article {article.url}")
        for article_id, existing in self.articles.items():
            if existing.url == article.url:
                self.articles[article_id] = replace(
                    existing, title=article.title, content=article.content
                )
                return StoredArticle(id=article_id, url=article.url)
        article_id = uuid.uuid4()
        self.articles[article_id] = replace(article, id=article_id)
        return StoredArticle(id=article_id, url=article.url)

    async def insert_analysis(self, analysis: AnalysisResult) -> uuid.UUID:
        if self.fail_analysis:
            raise PersistenceError("Failed to save analysis")
        analysis_id = uuid.uuid4()
        self.analyses.append(replace(analysis, id=analysis_id))
        return analysis_id

    async def insert_recommendation(self, recommendation: Recommendation) -> uuid.UUID:
        rec_id = uuid.uuid4()
        self.recommendations.append(replace(recommendation, id=rec_id))
        return rec_id

    async def save_analysis(
        self, analysis: AnalysisResult, recommendations: Sequence[Recommendation]
    ) -> tuple[uuid.UUID, list[uuid.UUID]]:
        if self.fail_analysis:
            raise PersistenceError("Failed to save analysis")
        for recommendation in recommendations:
            if recommendation.symbol in self.fail_recommendation_symbols:
                raise PersistenceError(
                    f"Failed to save recommendation for {recommendation.symbol}"
                )
        analysis_id = analysis.id or uuid.uuid4()
        saved = [replace(r, id=uuid.uuid4(), analysis_id=analysis_id) for r in recommendations]
        self.analyses.append(replace(analysis, id=analysis_id))
        self.recommendations.extend(saved)
        return analysis_id, [r.id for r in saved]

    async def find_historical_pattern(
        self, symbol: str, event_type: str
    ) -> HistoricalPattern | None:
        self.pattern_lookups.append((symbol, event_type))
        if self.fail_pattern_lookup:
            raise PersistenceError("pattern lookup failed")
        return self.patterns.get((symbol, event_type))

    async def get_article(self, article_id: uuid.UUID) -> Article | None:
        return self.articles.get(article_id)


def make_completion(responses: str | list[str], model: str = "test-model") -> MagicMock:
    """Mock CompletionClient returning ``responses`` in order (or one text always)."""
    usage = Usage(api_calls=[APICallUsage(model=model, input_tokens=500, output_tokens=200)])
    completion = MagicMock()
    completion.model = model
    if isinstance(responses, str):
        completion.complete = AsyncMock(return_value=(responses, usage))
    else:
        completion.complete = AsyncMock(side_effect=[(text, usage) for text in responses])
    return completion


# -- Fixtures --


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def stocks() -> StockRegistry:
    return StockRegistry(
        [
            TrackedStock("AAPL", "Apple Inc.", "tech-giant"),
            TrackedStock("MSFT", "Microsoft Corporation", "tech-giant"),
            TrackedStock("NVDA", "NVIDIA Corporation", "tech-giant"),
        ]
    )


@pytest.fixture
def article() -> Article:
    return Article(
        title="Apple announces acquisition of AI startup",
        url="https://example.com/apple-acquisition",
        source="Reuters",
        content="Apple Inc. said it will buy a small AI company.",
        published_at=datetime(2024, 1, 15, 13, 30, tzinfo=UTC),
        related_symbols=frozenset({"AAPL"}),
    )


@pytest.fixture
def analysis_payload() -> dict[str, Any]:
    return {
        "event_type": "acquisition",
        "sentiment_score": 0.6,
        "confidence_score": 0.8,
        "affected_stocks": [
            {
                "symbol": "AAPL",
                "impact": "positive",
                "recommendation": "BUY",
                "rationale": "Strengthens AI portfolio",
                "target_change": 5,
                "timeframe": "2_weeks",
            }
        ],
        "key_insights": ["Deal expands AI capability"],
        "risk_factors": ["Integration risk", "Regulatory review"],
        "historical_context": "Past acquisitions lifted the stock modestly.",
        "overall_assessment": "Moderately positive for Apple.",
    }
