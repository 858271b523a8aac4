"""Bounded background queue for per-article analysis."""

import asyncio
import logging
import uuid
from enum import StrEnum

from newsai.analysis.analyzer import AnalysisOutcome, ArticleAnalyzer
from newsai.data import Article
from newsai.errors import MalformedAnalysis

logger = logging.getLogger(__name__)


class JobStatus(StrEnum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AnalysisJob:
    """Handle for one submitted analysis.

    The outcome or error is recorded on the handle; callers poll ``status``
    or ``await job.wait()``.
    """

    def __init__(self, article_id: uuid.UUID, article: Article) -> None:
        self.article_id = article_id
        self.article = article
        self.outcome: AnalysisOutcome | None = None
        self.error: BaseException | None = None
        self._done = asyncio.Event()

    @property
    def status(self) -> JobStatus:
        if not self._done.is_set():
            return JobStatus.PENDING
        return JobStatus.FAILED if self.error is not None else JobStatus.SUCCEEDED

    @property
    def done(self) -> bool:
        return self._done.is_set()

    async def wait(self) -> JobStatus:
        await self._done.wait()
        return self.status

    def _succeed(self, outcome: AnalysisOutcome) -> None:
        self.outcome = outcome
        self._done.set()

    def _fail(self, error: BaseException) -> None:
        self.error = error
        self._done.set()

    def __repr__(self) -> str:
        return f"AnalysisJob(article_id={self.article_id}, status={self.status})"


class AnalysisQueue:
    """Fixed-capacity queue consumed by a fixed number of worker tasks.

    ``submit`` waits while the queue is full. A failed analysis is logged and
    recorded on its job; it never stops a worker.

    Args:
        analyzer: Analyzer that processes each job.
        workers: Number of concurrent worker tasks.
        capacity: Maximum number of queued jobs not yet picked up.
    """

    def __init__(
        self,
        analyzer: ArticleAnalyzer,
        *,
        workers: int = 2,
        capacity: int = 100,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._analyzer = analyzer
        self._num_workers = workers
        self._queue: asyncio.Queue[AnalysisJob] = asyncio.Queue(maxsize=capacity)
        self._workers: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def start(self) -> None:
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._work(), name=f"analysis-worker-{i}")
            for i in range(self._num_workers)
        ]
        logger.debug("Started %d analysis workers", self._num_workers)

    async def submit(self, article_id: uuid.UUID, article: Article) -> AnalysisJob:
        """Enqueue an article for analysis and return its job handle."""
        if not self._workers:
            raise RuntimeError("AnalysisQueue is not started")
        job = AnalysisJob(article_id, article)
        await self._queue.put(job)
        return job

    async def join(self) -> None:
        """Wait until every submitted job has finished."""
        await self._queue.join()

    async def close(self, *, drain: bool = True) -> None:
        """Stop the workers, first waiting for queued jobs when ``drain`` is set."""
        if not self._workers:
            return
        if drain:
            await self.join()
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logger.debug("Analysis workers stopped")

    async def _work(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                outcome = await self._analyzer.analyze(job.article_id, job.article)
            except asyncio.CancelledError:
                job._fail(asyncio.CancelledError("analysis cancelled"))
                raise
            except MalformedAnalysis as e:
                logger.warning("Malformed analysis for article %s: %s", job.article_id, e)
                job._fail(e)
            except Exception as e:
                logger.exception("Error analyzing article %s", job.article_id)
                job._fail(e)
            else:
                job._succeed(outcome)
            finally:
                self._queue.task_done()
