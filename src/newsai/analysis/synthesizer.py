"""Turn a validated analysis into persisted analysis and recommendation rows."""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from newsai.data import (
    RECOMMENDATION_TTL,
    AnalysisOutput,
    AnalysisResult,
    Recommendation,
    RiskLevel,
)
from newsai.stocks import StockRegistry
from newsai.store.base import NewsStore

logger = logging.getLogger(__name__)


def risk_level_for(risk_factors: Sequence[str]) -> RiskLevel:
    """Bucket the number of risk factors: none LOW, one or two MEDIUM, more HIGH."""
    if not risk_factors:
        return RiskLevel.LOW
    if len(risk_factors) <= 2:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


@dataclass(frozen=True)
class SynthesisResult:
    analysis: AnalysisResult
    recommendations: tuple[Recommendation, ...]


class RecommendationSynthesizer:
    """Persist an analysis and one recommendation per affected stock.

    Args:
        store: Store that receives the rows.
        stocks: Registry used to resolve display names.
    """

    def __init__(self, store: NewsStore, stocks: StockRegistry) -> None:
        self._store = store
        self._stocks = stocks

    def build_analysis(
        self,
        article_id: uuid.UUID,
        output: AnalysisOutput,
        model_version: str,
        now: datetime,
    ) -> AnalysisResult:
        return AnalysisResult(
            article_id=article_id,
            event_type=output.event_type,
            sentiment_score=output.sentiment_score,
            confidence_score=output.confidence_score,
            recommendation=output.primary_action,
            rationale=output.overall_assessment,
            risk_factors=output.risk_factors,
            historical_context=output.historical_context,
            key_insights=output.key_insights,
            analyzed_at=now,
            model_version=model_version,
        )

    def build_recommendations(
        self,
        analysis_id: uuid.UUID,
        output: AnalysisOutput,
        now: datetime,
    ) -> list[Recommendation]:
        """Build one recommendation per affected stock.

        Confidence comes from the analysis as a whole, not the stock entry;
        every recommendation expires ``RECOMMENDATION_TTL`` after ``now``.
        """
        risk_level = risk_level_for(output.risk_factors)
        return [
            Recommendation(
                analysis_id=analysis_id,
                symbol=stock.symbol,
                name=self._stocks.name_for(stock.symbol),
                action=stock.recommendation,
                confidence=output.confidence_score,
                target_change=stock.target_change,
                timeframe=stock.timeframe,
                reasoning=stock.rationale,
                risk_level=risk_level,
                created_at=now,
                expires_at=now + RECOMMENDATION_TTL,
                is_active=True,
            )
            for stock in output.affected_stocks
        ]

    async def persist(
        self,
        article_id: uuid.UUID,
        output: AnalysisOutput,
        model_version: str,
        *,
        now: datetime | None = None,
    ) -> SynthesisResult:
        """Save the analysis row together with its recommendations.

        Raises:
            PersistenceError: If the store rejects any row. Nothing is kept.
        """
        now = now or datetime.now(tz=UTC)
        analysis_id = uuid.uuid4()
        analysis = self.build_analysis(article_id, output, model_version, now)
        analysis = replace(analysis, id=analysis_id)
        recommendations = self.build_recommendations(analysis_id, output, now)
        analysis_id, rec_ids = await self._store.save_analysis(analysis, recommendations)

        analysis = replace(analysis, id=analysis_id)
        saved = tuple(
            replace(r, id=rec_id, analysis_id=analysis_id)
            for r, rec_id in zip(recommendations, rec_ids, strict=True)
        )
        logger.debug("Saved analysis %s with %d recommendation(s)", analysis_id, len(saved))
        return SynthesisResult(analysis=analysis, recommendations=saved)
