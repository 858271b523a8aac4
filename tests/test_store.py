"""Tests for SQLNewsStore against SQLite."""

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import select

from newsai.data import (
    RECOMMENDATION_TTL,
    Action,
    AnalysisResult,
    Article,
    EventType,
    HistoricalPattern,
    Recommendation,
    RiskLevel,
    Timeframe,
)
from newsai.errors import PersistenceError
from newsai.store.orm import AIAnalysisRow, RecommendationRow
from newsai.store.sql import SQLNewsStore

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

# -- Fixtures --


@pytest.fixture
async def sql_store(tmp_path: Path) -> AsyncIterator[SQLNewsStore]:
    store = SQLNewsStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await store.create_schema()
    yield store
    await store.close()


def _article(title: str = "Apple announces acquisition") -> Article:
    return Article(
        title=title,
        url="https://example.com/apple",
        source="Reuters",
        content="Original content",
        author="Jane Doe",
        published_at=datetime(2024, 1, 15, 13, 30, tzinfo=UTC),
        related_symbols=frozenset({"MSFT", "AAPL"}),
    )


def _pattern(timeframe: str, avg: float, updated: datetime) -> HistoricalPattern:
    return HistoricalPattern(
        symbol="AAPL",
        event_type="product-launch",
        timeframe=timeframe,
        avg_price_change=avg,
        median_price_change=avg - 1,
        sample_size=12,
        confidence=0.75,
        last_updated=updated,
    )


# -- Articles --


async def test_upsert_same_url_keeps_one_row_with_latest_title(sql_store: SQLNewsStore) -> None:
    first = await sql_store.upsert_article(_article("Old title"))
    second = await sql_store.upsert_article(_article("New title"))

    assert first.id == second.id
    assert second.url == "https://example.com/apple"
    assert await sql_store.count_articles() == 1

    stored = await sql_store.get_article(first.id)
    assert stored is not None
    assert stored.title == "New title"


async def test_upsert_conflict_updates_only_title_and_content(sql_store: SQLNewsStore) -> None:
    stored = await sql_store.upsert_article(_article())
    await sql_store.upsert_article(
        Article(title="T2", url="https://example.com/apple", source="Other", content="C2")
    )

    article = await sql_store.get_article(stored.id)
    assert article is not None
    assert article.content == "C2"
    assert article.source == "Reuters"
    assert article.author == "Jane Doe"


async def test_get_article_round_trip(sql_store: SQLNewsStore) -> None:
    stored = await sql_store.upsert_article(_article())
    article = await sql_store.get_article(stored.id)

    assert article is not None
    assert article.id == stored.id
    assert article.related_symbols == frozenset({"AAPL", "MSFT"})
    assert article.published_at is not None
    assert article.created_at is not None


async def test_get_missing_article(sql_store: SQLNewsStore) -> None:
    assert await sql_store.get_article(uuid.uuid4()) is None


async def test_count_articles_by_url(sql_store: SQLNewsStore) -> None:
    await sql_store.upsert_article(_article())
    assert await sql_store.count_articles(url="https://example.com/apple") == 1
    assert await sql_store.count_articles(url="https://example.com/other") == 0


# -- Analyses and recommendations --


async def test_insert_analysis_and_recommendation(sql_store: SQLNewsStore) -> None:
    stored = await sql_store.upsert_article(_article())
    analysis_id = await sql_store.insert_analysis(
        AnalysisResult(
            article_id=stored.id,
            event_type=EventType.ACQUISITION,
            sentiment_score=0.5,
            confidence_score=0.7,
            recommendation=Action.BUY,
            rationale="Positive",
            risk_factors=("Integration",),
            historical_context="",
            key_insights=("Insight",),
            analyzed_at=NOW,
            model_version="test-model",
        )
    )
    rec_id = await sql_store.insert_recommendation(
        Recommendation(
            analysis_id=analysis_id,
            symbol="AAPL",
            name="Apple Inc.",
            action=Action.BUY,
            confidence=0.7,
            target_change=5.0,
            timeframe=Timeframe.TWO_WEEKS,
            reasoning="Positive",
            risk_level=RiskLevel.MEDIUM,
            created_at=NOW,
            expires_at=NOW + RECOMMENDATION_TTL,
        )
    )

    async with sql_store.session() as session:
        analysis_row = (await session.execute(select(AIAnalysisRow))).scalar_one()
        rec_row = (await session.execute(select(RecommendationRow))).scalar_one()

    assert analysis_row.id == analysis_id
    assert analysis_row.event_type == "acquisition"
    assert analysis_row.risk_factors == ["Integration"]
    assert rec_row.id == rec_id
    assert rec_row.analysis_id == analysis_id
    assert rec_row.action == "BUY"
    assert rec_row.risk_level == "MEDIUM"
    assert rec_row.timeframe == "2_weeks"
    assert rec_row.is_active


def _analysis(article_id: uuid.UUID) -> AnalysisResult:
    return AnalysisResult(
        article_id=article_id,
        event_type=EventType.PARTNERSHIP,
        sentiment_score=0.3,
        confidence_score=0.6,
        recommendation=Action.BUY,
        rationale="Positive",
        risk_factors=(),
        historical_context="",
        key_insights=(),
        analyzed_at=NOW,
        model_version="test-model",
    )


def _recommendation(symbol: str | None) -> Recommendation:
    return Recommendation(
        analysis_id=uuid.uuid4(),
        symbol=symbol,  # type: ignore[arg-type]
        name=None,
        action=Action.BUY,
        confidence=0.6,
        target_change=2.0,
        timeframe=Timeframe.ONE_WEEK,
        reasoning="",
        risk_level=RiskLevel.LOW,
        created_at=NOW,
        expires_at=NOW + RECOMMENDATION_TTL,
    )


async def test_save_analysis_links_recommendations(sql_store: SQLNewsStore) -> None:
    stored = await sql_store.upsert_article(_article())
    analysis_id, rec_ids = await sql_store.save_analysis(
        _analysis(stored.id), [_recommendation("AAPL"), _recommendation("MSFT")]
    )

    async with sql_store.session() as session:
        rows = (await session.execute(select(RecommendationRow))).scalars().all()

    assert len(rec_ids) == 2
    assert {row.id for row in rows} == set(rec_ids)
    assert {row.analysis_id for row in rows} == {analysis_id}


async def test_save_analysis_failure_writes_nothing(sql_store: SQLNewsStore) -> None:
    stored = await sql_store.upsert_article(_article())
    # The second row violates NOT NULL on stock_symbol
    recommendations = [_recommendation("AAPL"), _recommendation(None), _recommendation("NVDA")]

    with pytest.raises(PersistenceError):
        await sql_store.save_analysis(_analysis(stored.id), recommendations)

    async with sql_store.session() as session:
        analyses = (await session.execute(select(AIAnalysisRow))).scalars().all()
        recs = (await session.execute(select(RecommendationRow))).scalars().all()
    assert analyses == []
    assert recs == []


# -- Historical patterns --


async def test_find_missing_pattern(sql_store: SQLNewsStore) -> None:
    assert await sql_store.find_historical_pattern("AAPL", "product-launch") is None


async def test_find_returns_most_recently_updated(sql_store: SQLNewsStore) -> None:
    await sql_store.upsert_historical_pattern(_pattern("2_weeks", 8.5, NOW - timedelta(days=3)))
    await sql_store.upsert_historical_pattern(_pattern("1_month", 12.0, NOW))

    pattern = await sql_store.find_historical_pattern("AAPL", "product-launch")

    assert pattern is not None
    assert pattern.timeframe == "1_month"
    assert pattern.avg_price_change == pytest.approx(12.0)
    assert pattern.median_price_change == pytest.approx(11.0)
    assert pattern.sample_size == 12


async def test_upsert_pattern_replaces_same_key(sql_store: SQLNewsStore) -> None:
    await sql_store.upsert_historical_pattern(_pattern("2_weeks", 8.5, NOW))
    await sql_store.upsert_historical_pattern(_pattern("2_weeks", 9.5, NOW + timedelta(hours=1)))

    pattern = await sql_store.find_historical_pattern("AAPL", "product-launch")
    assert pattern is not None
    assert pattern.avg_price_change == pytest.approx(9.5)


# -- Errors and session scope --


async def test_missing_schema_raises_persistence_error(tmp_path: Path) -> None:
    async with SQLNewsStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}") as store:
        with pytest.raises(PersistenceError, match="Failed to save article"):
            await store.upsert_article(_article())
        with pytest.raises(PersistenceError):
            await store.find_historical_pattern("AAPL", "earnings")


async def test_session_held_past_deadline_logs_error(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    store = SQLNewsStore.from_url(
        f"sqlite+aiosqlite:///{tmp_path / 'slow.db'}", checkout_warning_seconds=0.01
    )
    async with store:
        async with store.session():
            await asyncio.sleep(0.05)

    assert "checked out for more than" in caplog.text


async def test_session_timer_cancelled_on_error(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    store = SQLNewsStore.from_url(
        f"sqlite+aiosqlite:///{tmp_path / 'err.db'}", checkout_warning_seconds=0.02
    )
    async with store:
        with pytest.raises(RuntimeError):
            async with store.session():
                raise RuntimeError("boom")
        await asyncio.sleep(0.05)

    assert "checked out for more than" not in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
