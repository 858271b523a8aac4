"""Persistence interface consumed by the pipeline."""

import uuid
from collections.abc import Sequence
from typing import Protocol

from newsai.data import AnalysisResult, Article, HistoricalPattern, Recommendation, StoredArticle


class NewsStore(Protocol):
    """Interface for the relational store behind the pipeline.

    Every method raises :class:`newsai.errors.PersistenceError` on failure.
    """

    async def upsert_article(self, article: Article) -> StoredArticle:
        """Insert an article, or update title/content/updated_at on a URL conflict."""
        ...

    async def insert_analysis(self, analysis: AnalysisResult) -> uuid.UUID:
        """Insert a new analysis row and return its id."""
        ...

    async def insert_recommendation(self, recommendation: Recommendation) -> uuid.UUID:
        """Insert a new recommendation row and return its id."""
        ...

    async def save_analysis(
        self, analysis: AnalysisResult, recommendations: Sequence[Recommendation]
    ) -> tuple[uuid.UUID, list[uuid.UUID]]:
        """Insert an analysis and its recommendations in one transaction.

        Each recommendation is linked to the analysis row regardless of its
        own ``analysis_id``. Nothing is written when any row fails.

        Returns:
            Tuple of (analysis id, recommendation ids in input order).
        """
        ...

    async def find_historical_pattern(
        self, symbol: str, event_type: str
    ) -> HistoricalPattern | None:
        """Return the most recently updated pattern for (symbol, event_type)."""
        ...

    async def get_article(self, article_id: uuid.UUID) -> Article | None:
        """Load a stored article by id."""
        ...
