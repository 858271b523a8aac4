"""SQLAlchemy (async) implementation of :class:`newsai.store.base.NewsStore`."""

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from types import TracebackType
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from newsai.data import AnalysisResult, Article, HistoricalPattern, Recommendation, StoredArticle
from newsai.errors import PersistenceError
from newsai.store.orm import (
    AIAnalysisRow,
    Base,
    HistoricalPatternRow,
    NewsArticleRow,
    RecommendationRow,
)

logger = logging.getLogger(__name__)


class SQLNewsStore:
    """Relational store for articles, analyses, recommendations and patterns.

    Upserts rely on the database's unique constraints (``url`` for articles,
    ``(stock_symbol, event_type, timeframe)`` for patterns), so concurrent
    writers need no application-level locking. Supports PostgreSQL (asyncpg)
    and SQLite (aiosqlite).

    Args:
        engine: Async engine owned by this store; disposed by :meth:`close`.
        checkout_warning_seconds: Log an error when a session stays checked
            out longer than this.
    """

    def __init__(self, engine: AsyncEngine, *, checkout_warning_seconds: float = 5.0) -> None:
        self._engine = engine
        self._session_factory = async_sessionmaker(engine, expire_on_commit=False)
        self._checkout_warning = checkout_warning_seconds

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        pool_size: int | None = None,
        echo: bool = False,
        checkout_warning_seconds: float = 5.0,
    ) -> "SQLNewsStore":
        engine_kwargs: dict[str, Any] = {"echo": echo}
        if pool_size is not None and not url.startswith("sqlite"):
            engine_kwargs["pool_size"] = pool_size
        engine = create_async_engine(url, **engine_kwargs)
        return cls(engine, checkout_warning_seconds=checkout_warning_seconds)

    async def __aenter__(self) -> "SQLNewsStore":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._engine.dispose()

    async def create_schema(self) -> None:
        """Create all tables. For local SQLite databases and tests only."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Check out a session for the duration of the block.

        A timer logs an error if the session is held past the checkout
        deadline. The timer is cancelled and the session released on every
        exit path.
        """
        loop = asyncio.get_running_loop()
        timer = loop.call_later(
            self._checkout_warning,
            logger.error,
            "A database session has been checked out for more than %.1f seconds",
            self._checkout_warning,
        )
        try:
            async with self._session_factory() as session:
                yield session
        finally:
            timer.cancel()

    def _insert(self, table: type[Base]) -> Any:
        dialect = self._engine.dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        if dialect == "sqlite":
            return sqlite.insert(table)
        raise PersistenceError(f"Unsupported database dialect for upserts: {dialect}")

    async def upsert_article(self, article: Article) -> StoredArticle:
        now = datetime.now(tz=UTC)
        try:
            async with self.session() as session:
                stmt = self._insert(NewsArticleRow).values(
                    id=uuid.uuid4(),
                    title=article.title,
                    content=article.content,
                    summary=article.summary,
                    source=article.source,
                    author=article.author,
                    url=article.url,
                    image_url=article.image_url,
                    published_at=article.published_at,
                    related_stocks=sorted(article.related_symbols),
                    created_at=now,
                    updated_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["url"],
                    set_={
                        "title": stmt.excluded.title,
                        "content": stmt.excluded.content,
                        "updated_at": now,
                    },
                ).returning(NewsArticleRow.id, NewsArticleRow.url)
                row = (await session.execute(stmt)).one()
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save article {article.url}: {e}") from e
        return StoredArticle(id=row.id, url=row.url)

    async def insert_analysis(self, analysis: AnalysisResult) -> uuid.UUID:
        row = _analysis_row(analysis)
        try:
            async with self.session() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save analysis for article {analysis.article_id}: {e}"
            ) from e
        return row.id

    async def insert_recommendation(self, recommendation: Recommendation) -> uuid.UUID:
        row = _recommendation_row(recommendation)
        try:
            async with self.session() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save recommendation for {recommendation.symbol}: {e}"
            ) from e
        return row.id

    async def save_analysis(
        self, analysis: AnalysisResult, recommendations: Sequence[Recommendation]
    ) -> tuple[uuid.UUID, list[uuid.UUID]]:
        analysis_row = _analysis_row(analysis)
        rec_rows = [
            _recommendation_row(replace(r, analysis_id=analysis_row.id)) for r in recommendations
        ]
        try:
            async with self.session() as session:
                session.add(analysis_row)
                # Recommendation rows reference the analysis row
                await session.flush()
                session.add_all(rec_rows)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save analysis for article {analysis.article_id}: {e}"
            ) from e
        return analysis_row.id, [row.id for row in rec_rows]

    async def find_historical_pattern(
        self, symbol: str, event_type: str
    ) -> HistoricalPattern | None:
        stmt = (
            select(HistoricalPatternRow)
            .where(
                HistoricalPatternRow.stock_symbol == symbol,
                HistoricalPatternRow.event_type == event_type,
            )
            .order_by(HistoricalPatternRow.last_updated.desc())
            .limit(1)
        )
        try:
            async with self.session() as session:
                row = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to fetch historical pattern for {symbol}/{event_type}: {e}"
            ) from e
        if row is None:
            return None
        return HistoricalPattern(
            symbol=row.stock_symbol,
            event_type=row.event_type or "",
            timeframe=row.timeframe or "",
            avg_price_change=row.avg_price_change or 0.0,
            median_price_change=row.median_price_change,
            sample_size=row.sample_size or 0,
            confidence=row.confidence or 0.0,
            data_points=list(row.data_points or []),
            last_updated=row.last_updated,
        )

    async def upsert_historical_pattern(self, pattern: HistoricalPattern) -> None:
        last_updated = pattern.last_updated or datetime.now(tz=UTC)
        values = {
            "avg_price_change": pattern.avg_price_change,
            "median_price_change": pattern.median_price_change,
            "sample_size": pattern.sample_size,
            "confidence": pattern.confidence,
            "data_points": list(pattern.data_points),
            "last_updated": last_updated,
        }
        try:
            async with self.session() as session:
                stmt = self._insert(HistoricalPatternRow).values(
                    id=uuid.uuid4(),
                    stock_symbol=pattern.symbol,
                    event_type=pattern.event_type,
                    timeframe=pattern.timeframe,
                    **values,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["stock_symbol", "event_type", "timeframe"],
                    set_=values,
                )
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save historical pattern for {pattern.symbol}/{pattern.event_type}: {e}"
            ) from e

    async def get_article(self, article_id: uuid.UUID) -> Article | None:
        try:
            async with self.session() as session:
                row = await session.get(NewsArticleRow, article_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load article {article_id}: {e}") from e
        if row is None:
            return None
        return Article(
            id=row.id,
            title=row.title,
            url=row.url,
            source=row.source or "",
            content=row.content or "",
            summary=row.summary,
            author=row.author,
            image_url=row.image_url,
            published_at=row.published_at,
            related_symbols=frozenset(row.related_stocks or []),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    async def count_articles(self, url: str | None = None) -> int:
        """Count stored articles, optionally only those with ``url``."""
        stmt = select(func.count()).select_from(NewsArticleRow)
        if url is not None:
            stmt = stmt.where(NewsArticleRow.url == url)
        try:
            async with self.session() as session:
                return (await session.execute(stmt)).scalar_one()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to count articles: {e}") from e


def _analysis_row(analysis: AnalysisResult) -> AIAnalysisRow:
    return AIAnalysisRow(
        id=analysis.id or uuid.uuid4(),
        article_id=analysis.article_id,
        event_type=analysis.event_type.value,
        sentiment_score=analysis.sentiment_score,
        confidence_score=analysis.confidence_score,
        recommendation=analysis.recommendation.value,
        rationale=analysis.rationale,
        risk_factors=list(analysis.risk_factors),
        historical_context=analysis.historical_context,
        key_insights=list(analysis.key_insights),
        analyzed_at=analysis.analyzed_at,
        model_version=analysis.model_version,
    )


def _recommendation_row(recommendation: Recommendation) -> RecommendationRow:
    return RecommendationRow(
        id=recommendation.id or uuid.uuid4(),
        analysis_id=recommendation.analysis_id,
        stock_symbol=recommendation.symbol,
        stock_name=recommendation.name,
        action=recommendation.action.value,
        confidence=recommendation.confidence,
        target_change=recommendation.target_change,
        timeframe=recommendation.timeframe.value,
        reasoning=recommendation.reasoning,
        risk_level=recommendation.risk_level.value,
        created_at=recommendation.created_at,
        expires_at=recommendation.expires_at,
        is_active=recommendation.is_active,
    )
