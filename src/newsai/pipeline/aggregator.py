"""Aggregation run: fetch, deduplicate, filter, persist and dispatch analysis."""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from newsai.analysis.analyzer import AnalysisOutcome, ArticleAnalyzer
from newsai.data import Article, Usage
from newsai.dedup import deduplicate_articles
from newsai.errors import ArticleNotFound, BatchAggregationError, PersistenceError
from newsai.impact import filter_high_impact
from newsai.pipeline.queue import AnalysisJob, AnalysisQueue, JobStatus
from newsai.providers.base import NewsProvider
from newsai.run_logger import RunLogger
from newsai.stocks import StockRegistry
from newsai.store.base import NewsStore

logger = logging.getLogger(__name__)


@dataclass
class AggregationSummary:
    """Outcome of one aggregation run.

    ``analysis_pending`` counts analyses still in flight when the summary was
    produced; their jobs remain pollable through ``jobs``.
    """

    success: bool
    saved: int = 0
    analyzed: int = 0
    analysis_failed: int = 0
    analysis_pending: int = 0
    duration_seconds: float = 0.0
    error: str | None = None
    jobs: list[AnalysisJob] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "saved": self.saved,
            "analyzed": self.analyzed,
            "duration_seconds": self.duration_seconds,
        }


class NewsAggregator:
    """Runs aggregation batches over a set of providers.

    Flow:
    1. All providers fetch in parallel
    2. Results are concatenated in provider order and deduplicated by URL
    3. Articles without market-moving keywords are dropped
    4. Each remaining article is upserted, then queued for analysis

    Args:
        providers: News providers to fetch from.
        store: Store for articles and analysis results.
        analyzer: Per-article analyzer used by the queue workers.
        stocks: Tracked-instrument registry.
        analysis_workers: Number of concurrent analysis workers.
        queue_capacity: Maximum number of queued analyses.
        join_timeout: Seconds ``run`` waits for analyses before returning.
            None waits for all of them, 0 does not wait.
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        providers: list[NewsProvider],
        store: NewsStore,
        analyzer: ArticleAnalyzer,
        stocks: StockRegistry,
        *,
        analysis_workers: int = 2,
        queue_capacity: int = 100,
        join_timeout: float | None = 60.0,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._providers = providers
        self._store = store
        self._analyzer = analyzer
        self._stocks = stocks
        self._queue = AnalysisQueue(analyzer, workers=analysis_workers, capacity=queue_capacity)
        self._join_timeout = join_timeout
        self._run_logger = run_logger

    async def __aenter__(self) -> "NewsAggregator":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def start(self) -> None:
        self._queue.start()

    async def close(self) -> None:
        """Wait for outstanding analyses, then stop the workers."""
        await self._queue.close()

    async def run(self, trigger: str = "manual") -> AggregationSummary:
        """Execute one aggregation batch.

        Failures of a single provider, a single upsert or a single analysis
        only reduce the counts. Anything else ends the run with
        ``success=False``.

        Args:
            trigger: Label of whatever started the run.

        Returns:
            Summary of the run.
        """
        logger.info("Starting news aggregation (trigger: %s)", trigger)
        if self._run_logger:
            self._run_logger.start_run(trigger)
        started = time.monotonic()
        total_usage = Usage()
        jobs: list[AnalysisJob] = []
        self.start()

        try:
            articles = await self._fetch_all(total_usage)
            relevant = self._select(articles)
            saved = await self._persist_and_dispatch(relevant, jobs)
        except Exception as e:
            logger.exception("News aggregation failed")
            error = BatchAggregationError(f"News aggregation failed: {e}")
            summary = AggregationSummary(
                success=False,
                error=str(error),
                saved=len(jobs),
                analysis_pending=sum(1 for job in jobs if not job.done),
                duration_seconds=round(time.monotonic() - started, 3),
                jobs=jobs,
                usage=total_usage,
            )
            if self._run_logger:
                self._run_logger.finish_run(summary.to_dict(), total_usage)
            return summary

        t0 = time.monotonic()
        await self._wait_for(jobs)
        analysis_duration = time.monotonic() - t0

        statuses = [job.status for job in jobs]
        for job in jobs:
            if job.outcome is not None:
                total_usage += job.outcome.usage

        summary = AggregationSummary(
            success=True,
            saved=saved,
            analyzed=statuses.count(JobStatus.SUCCEEDED),
            analysis_failed=statuses.count(JobStatus.FAILED),
            analysis_pending=statuses.count(JobStatus.PENDING),
            duration_seconds=round(time.monotonic() - started, 3),
            jobs=jobs,
            usage=total_usage,
        )
        logger.info(
            "News aggregation completed: %d saved, %d analyzed, %d failed, %d pending in %.2fs",
            summary.saved,
            summary.analyzed,
            summary.analysis_failed,
            summary.analysis_pending,
            summary.duration_seconds,
        )

        if self._run_logger:
            self._run_logger.log_stage(
                stage="analysis",
                component=type(self._analyzer).__name__,
                input_data={"dispatched": len(jobs)},
                output_data={
                    "succeeded": summary.analyzed,
                    "failed": summary.analysis_failed,
                    "pending": summary.analysis_pending,
                },
                usage=None,
                duration_seconds=analysis_duration,
            )
            self._run_logger.finish_run(summary.to_dict(), total_usage)
        return summary

    async def reanalyze(self, article_id: uuid.UUID) -> AnalysisOutcome:
        """Analyze one stored article immediately, bypassing the queue.

        Raises:
            ArticleNotFound: If no article has this id.
            MalformedAnalysis: If the AI response cannot be parsed.
        """
        article = await self._store.get_article(article_id)
        if article is None:
            raise ArticleNotFound(f"Article not found: {article_id}")
        return await self._analyzer.analyze(article_id, article)

    async def _fetch_all(self, total_usage: Usage) -> list[Article]:
        t0 = time.monotonic()
        results = await asyncio.gather(
            *(provider.fetch(self._stocks) for provider in self._providers),
            return_exceptions=True,
        )
        duration = time.monotonic() - t0

        articles: list[Article] = []
        for provider, result in zip(self._providers, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning("Error fetching from %s: %s", provider.name, result)
                continue
            fetched, usage = result
            logger.info("Fetched %d articles from %s", len(fetched), provider.name)
            articles.extend(fetched)
            total_usage += usage

            if self._run_logger:
                self._run_logger.log_stage(
                    stage="fetch",
                    component=provider.name,
                    input_data={"symbols": len(self._stocks)},
                    output_data={"article_count": len(fetched)},
                    usage=usage,
                    duration_seconds=duration,
                )
        return articles

    def _select(self, articles: list[Article]) -> list[Article]:
        t0 = time.monotonic()
        unique = deduplicate_articles(articles)
        dedup_duration = time.monotonic() - t0
        logger.info("Unique articles after deduplication: %d", len(unique))

        t0 = time.monotonic()
        relevant = filter_high_impact(unique)
        filter_duration = time.monotonic() - t0
        logger.info("High-impact articles: %d", len(relevant))

        if self._run_logger:
            self._run_logger.log_stage(
                stage="deduplication",
                component="url_dedup",
                input_data={"article_count": len(articles)},
                output_data={"article_count": len(unique)},
                usage=None,
                duration_seconds=dedup_duration,
            )
            self._run_logger.log_stage(
                stage="impact_filter",
                component="keyword_filter",
                input_data={"article_count": len(unique)},
                output_data=[a.url for a in relevant],
                usage=None,
                duration_seconds=filter_duration,
            )
        return relevant

    async def _persist_and_dispatch(
        self, articles: list[Article], jobs: list[AnalysisJob]
    ) -> int:
        """Upsert each article and queue its analysis, appending handles to ``jobs``."""
        t0 = time.monotonic()
        saved = 0
        for article in articles:
            try:
                stored = await self._store.upsert_article(article)
            except PersistenceError as e:
                logger.error("Error saving article %s: %s", article.url, e)
                continue
            saved += 1
            jobs.append(await self._queue.submit(stored.id, article))

        if self._run_logger:
            self._run_logger.log_stage(
                stage="persistence",
                component=type(self._store).__name__,
                input_data={"article_count": len(articles)},
                output_data={"saved": saved},
                usage=None,
                duration_seconds=time.monotonic() - t0,
            )
        return saved

    async def _wait_for(self, jobs: list[AnalysisJob]) -> None:
        if not jobs or self._join_timeout == 0:
            return
        try:
            async with asyncio.timeout(self._join_timeout):
                await asyncio.gather(*(job.wait() for job in jobs))
        except TimeoutError:
            pending = sum(1 for job in jobs if not job.done)
            logger.info("Returning with %d analyses still in flight", pending)
