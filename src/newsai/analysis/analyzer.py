"""Per-article analysis: context lookup, AI call, parsing and persistence."""

import asyncio
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from newsai.analysis.history import lookup_historical_patterns
from newsai.analysis.parser import parse_analysis_response
from newsai.analysis.prompt import build_analysis_prompt
from newsai.analysis.synthesizer import RecommendationSynthesizer, SynthesisResult
from newsai.completion.base import CompletionClient
from newsai.data import AnalysisOutput, Article, Usage
from newsai.stocks import StockRegistry
from newsai.store.base import NewsStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of analyzing one article."""

    article_id: uuid.UUID
    output: AnalysisOutput
    synthesis: SynthesisResult
    usage: Usage

    @property
    def analysis_id(self) -> uuid.UUID | None:
        return self.synthesis.analysis.id

    @property
    def recommendation_ids(self) -> list[uuid.UUID]:
        return [r.id for r in self.synthesis.recommendations if r.id is not None]

    @property
    def tokens_used(self) -> int:
        return self.usage.total_tokens


@dataclass(frozen=True)
class BulkAnalysisResult:
    success: int = 0
    failed: int = 0
    total_tokens: int = 0


class ArticleAnalyzer:
    """Analyze stored articles with the AI provider and persist the results.

    Args:
        completion: AI provider client.
        store: Store for pattern lookup and result persistence.
        stocks: Tracked-instrument registry.
    """

    def __init__(
        self,
        completion: CompletionClient,
        store: NewsStore,
        stocks: StockRegistry,
    ) -> None:
        self._completion = completion
        self._store = store
        self._stocks = stocks
        self._synthesizer = RecommendationSynthesizer(store, stocks)

    async def analyze(self, article_id: uuid.UUID, article: Article) -> AnalysisOutcome:
        """Analyze one article.

        Args:
            article_id: Id of the stored article.
            article: Article content.

        Returns:
            The parsed output and the persisted rows.

        Raises:
            MalformedAnalysis: If the AI response cannot be parsed. Nothing
                is persisted in that case.
            PersistenceError: If saving the analysis fails.
        """
        logger.info("Analyzing article: %.50s...", article.title)

        patterns = await lookup_historical_patterns(self._store, article.related_symbols)
        prompt = build_analysis_prompt(article, self._stocks, patterns)
        text, usage = await self._completion.complete(prompt)
        output = parse_analysis_response(text)

        synthesis = await self._synthesizer.persist(article_id, output, self._completion.model)
        logger.info("Analysis completed for article %s", article_id)
        return AnalysisOutcome(
            article_id=article_id,
            output=output,
            synthesis=synthesis,
            usage=usage,
        )

    async def bulk_analyze(
        self,
        articles: Sequence[tuple[uuid.UUID, Article]],
        *,
        delay: float = 1.0,
    ) -> BulkAnalysisResult:
        """Analyze articles one at a time, pausing ``delay`` seconds between them.

        A failed article is logged and counted; it does not stop the batch.
        """
        logger.info("Starting bulk analysis of %d articles...", len(articles))
        success = failed = total_tokens = 0

        for i, (article_id, article) in enumerate(articles):
            if i > 0 and delay > 0:
                await asyncio.sleep(delay)
            try:
                outcome = await self.analyze(article_id, article)
            except Exception as e:
                logger.error("Bulk analysis failed for article %s: %s", article_id, e)
                failed += 1
                continue
            success += 1
            total_tokens += outcome.tokens_used

        logger.info(
            "Bulk analysis complete: %d success, %d failed, %d tokens used",
            success,
            failed,
            total_tokens,
        )
        return BulkAnalysisResult(success=success, failed=failed, total_tokens=total_tokens)
