"""Aggregation runs and background analysis."""

from newsai.pipeline.aggregator import AggregationSummary, NewsAggregator
from newsai.pipeline.queue import AnalysisJob, AnalysisQueue, JobStatus

__all__ = [
    "AggregationSummary",
    "AnalysisJob",
    "AnalysisQueue",
    "JobStatus",
    "NewsAggregator",
]
