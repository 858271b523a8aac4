"""Exception taxonomy for the aggregation pipeline."""


class NewsAIError(Exception):
    """Base class for newsai errors."""


class ProviderFetchError(NewsAIError):
    """A single provider request failed (network error, bad status, bad payload).

    Always recovered inside the adapter: the request contributes no articles.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class PersistenceError(NewsAIError):
    """A store read or write failed."""


class ArticleNotFound(PersistenceError):
    """No stored article has the requested id."""


class MalformedAnalysis(NewsAIError):
    """The AI response did not contain a parsable analysis object.

    Terminal for the analysis of one article, never for the batch.
    """

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class BatchAggregationError(NewsAIError):
    """An aggregation run failed outside the per-article isolation boundaries."""
