"""Tests for ArticleAnalyzer."""

import json
import uuid
from typing import Any

import pytest

from conftest import InMemoryStore, make_completion
from newsai.analysis.analyzer import ArticleAnalyzer
from newsai.data import Action, Article, EventType, HistoricalPattern, RiskLevel
from newsai.errors import MalformedAnalysis
from newsai.stocks import StockRegistry


async def test_analyze_persists_analysis_and_recommendations(
    store: InMemoryStore,
    stocks: StockRegistry,
    article: Article,
    analysis_payload: dict[str, Any],
) -> None:
    completion = make_completion(json.dumps(analysis_payload))
    analyzer = ArticleAnalyzer(completion, store, stocks)
    article_id = uuid.uuid4()

    outcome = await analyzer.analyze(article_id, article)

    assert outcome.article_id == article_id
    assert outcome.output.event_type == EventType.ACQUISITION
    assert outcome.analysis_id == store.analyses[0].id
    assert outcome.recommendation_ids == [r.id for r in store.recommendations]
    assert outcome.tokens_used == 700

    analysis = store.analyses[0]
    assert analysis.article_id == article_id
    assert analysis.model_version == "test-model"
    assert analysis.recommendation == Action.BUY

    rec = store.recommendations[0]
    assert rec.symbol == "AAPL"
    assert rec.name == "Apple Inc."
    assert rec.risk_level == RiskLevel.MEDIUM


async def test_analyze_includes_historical_patterns_in_prompt(
    store: InMemoryStore,
    stocks: StockRegistry,
    article: Article,
    analysis_payload: dict[str, Any],
) -> None:
    store.patterns[("AAPL", "acquisition")] = HistoricalPattern(
        symbol="AAPL",
        event_type="acquisition",
        timeframe="1_month",
        avg_price_change=4.2,
        sample_size=6,
        confidence=0.6,
    )
    completion = make_completion(json.dumps(analysis_payload))

    await ArticleAnalyzer(completion, store, stocks).analyze(uuid.uuid4(), article)

    prompt = completion.complete.call_args.args[0]
    assert "- AAPL during acquisition: Average change of 4.2% over 1_month" in prompt


async def test_malformed_response_persists_nothing(
    store: InMemoryStore, stocks: StockRegistry, article: Article
) -> None:
    completion = make_completion("Sorry, I can't help with that.")
    analyzer = ArticleAnalyzer(completion, store, stocks)

    with pytest.raises(MalformedAnalysis):
        await analyzer.analyze(uuid.uuid4(), article)

    assert store.analyses == []
    assert store.recommendations == []


async def test_completion_error_propagates(
    store: InMemoryStore, stocks: StockRegistry, article: Article
) -> None:
    completion = make_completion("")
    completion.complete.side_effect = RuntimeError("API unavailable")

    with pytest.raises(RuntimeError, match="API unavailable"):
        await ArticleAnalyzer(completion, store, stocks).analyze(uuid.uuid4(), article)


async def test_bulk_analyze_counts_success_and_failure(
    store: InMemoryStore,
    stocks: StockRegistry,
    article: Article,
    analysis_payload: dict[str, Any],
) -> None:
    good = json.dumps(analysis_payload)
    completion = make_completion([good, "not json", good])
    analyzer = ArticleAnalyzer(completion, store, stocks)
    items = [(uuid.uuid4(), article) for _ in range(3)]

    result = await analyzer.bulk_analyze(items, delay=0)

    assert result.success == 2
    assert result.failed == 1
    assert result.total_tokens == 1400
    assert len(store.analyses) == 2


async def test_bulk_analyze_empty(store: InMemoryStore, stocks: StockRegistry) -> None:
    analyzer = ArticleAnalyzer(make_completion("{}"), store, stocks)
    result = await analyzer.bulk_analyze([], delay=0)
    assert (result.success, result.failed, result.total_tokens) == (0, 0, 0)


async def test_prose_wrapped_response_yields_low_risk_buy(
    store: InMemoryStore, stocks: StockRegistry, article: Article
) -> None:
    text = (
        "Note: here is the result\n"
        '{"event_type":"earnings","sentiment_score":0.4,"confidence_score":0.8,'
        '"affected_stocks":[{"symbol":"AAPL","recommendation":"BUY","target_change":3.5,'
        '"timeframe":"1_week","rationale":"strong beat"}],"key_insights":["beat EPS"],'
        '"risk_factors":[],"historical_context":"n/a","overall_assessment":"positive"}'
        "\nthanks"
    )
    analyzer = ArticleAnalyzer(make_completion(text), store, stocks)

    await analyzer.analyze(uuid.uuid4(), article)

    assert len(store.recommendations) == 1
    rec = store.recommendations[0]
    assert rec.symbol == "AAPL"
    assert rec.action == Action.BUY
    assert rec.risk_level == RiskLevel.LOW
    assert rec.target_change == pytest.approx(3.5)
