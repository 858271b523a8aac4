"""SQLAlchemy ORM tables backing :class:`newsai.store.sql.SQLNewsStore`.

Table and column names match the production PostgreSQL schema, which is
maintained outside this package. ``Base.metadata.create_all`` is only used
for local SQLite databases and tests.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


class NewsArticleRow(Base):
    __tablename__ = "news_articles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str | None] = mapped_column(Text)
    summary: Mapped[str | None] = mapped_column(Text)
    source: Mapped[str | None] = mapped_column(String(100))
    author: Mapped[str | None] = mapped_column(String(255))
    url: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    related_stocks: Mapped[list[str]] = mapped_column(JSONType, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (Index("idx_news_published", "published_at"),)


class AIAnalysisRow(Base):
    __tablename__ = "ai_analysis"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    article_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("news_articles.id", ondelete="CASCADE")
    )
    event_type: Mapped[str | None] = mapped_column(String(100))
    sentiment_score: Mapped[float | None] = mapped_column(Float)
    confidence_score: Mapped[float | None] = mapped_column(Float)
    recommendation: Mapped[str | None] = mapped_column(String(20))
    rationale: Mapped[str | None] = mapped_column(Text)
    risk_factors: Mapped[list[str]] = mapped_column(JSONType, default=list)
    historical_context: Mapped[str | None] = mapped_column(Text)
    key_insights: Mapped[list[str]] = mapped_column(JSONType, default=list)
    analyzed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    model_version: Mapped[str | None] = mapped_column(String(50))

    __table_args__ = (Index("idx_analysis_article", "article_id"),)


class RecommendationRow(Base):
    __tablename__ = "recommendations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    analysis_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("ai_analysis.id", ondelete="CASCADE")
    )
    stock_symbol: Mapped[str] = mapped_column(String(10), nullable=False)
    stock_name: Mapped[str | None] = mapped_column(String(255))
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    confidence: Mapped[float | None] = mapped_column(Float)
    target_change: Mapped[float | None] = mapped_column(Float)
    timeframe: Mapped[str | None] = mapped_column(String(50))
    reasoning: Mapped[str | None] = mapped_column(Text)
    risk_level: Mapped[str | None] = mapped_column(String(20))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    __table_args__ = (
        Index("idx_recommendations_stock", "stock_symbol"),
        Index("idx_recommendations_active", "is_active", "created_at"),
    )


class HistoricalPatternRow(Base):
    __tablename__ = "historical_patterns"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    stock_symbol: Mapped[str] = mapped_column(String(10), nullable=False)
    event_type: Mapped[str | None] = mapped_column(String(100))
    avg_price_change: Mapped[float | None] = mapped_column(Float)
    median_price_change: Mapped[float | None] = mapped_column(Float)
    timeframe: Mapped[str | None] = mapped_column(String(50))
    sample_size: Mapped[int | None] = mapped_column(Integer)
    confidence: Mapped[float | None] = mapped_column(Float)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    data_points: Mapped[list[Any]] = mapped_column(JSONType, default=list)

    __table_args__ = (
        UniqueConstraint("stock_symbol", "event_type", "timeframe"),
        Index("idx_patterns_stock", "stock_symbol"),
    )
