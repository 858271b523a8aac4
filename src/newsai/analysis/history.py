"""Historical-pattern context for analysis prompts.

The event type of an article is not known until the AI has classified it,
so the lookup guesses: every related symbol is tried against a fixed list
of common event types and whatever rows exist are passed along as context.
This is a heuristic, not a join; missing rows simply mean less context.
"""

import logging
from collections.abc import Iterable

from newsai.data import EventType, HistoricalPattern
from newsai.errors import PersistenceError
from newsai.store.base import NewsStore

logger = logging.getLogger(__name__)

HISTORICAL_EVENT_CANDIDATES: tuple[EventType, ...] = (
    EventType.PRODUCT_LAUNCH,
    EventType.ACQUISITION,
    EventType.EARNINGS,
    EventType.PARTNERSHIP,
    EventType.LEGAL_ISSUES,
)


async def lookup_historical_patterns(
    store: NewsStore,
    symbols: Iterable[str],
    event_types: Iterable[EventType] = HISTORICAL_EVENT_CANDIDATES,
) -> list[HistoricalPattern]:
    """Collect stored patterns for every (symbol, candidate event type) pair.

    Lookup failures are logged and treated as absence.

    Args:
        store: Store to query.
        symbols: Related instrument symbols of the article.
        event_types: Candidate event types to try for each symbol.

    Returns:
        Patterns found, ordered by symbol then candidate order.
    """
    candidates = tuple(event_types)
    patterns: list[HistoricalPattern] = []
    for symbol in sorted(symbols):
        for event_type in candidates:
            try:
                pattern = await store.find_historical_pattern(symbol, event_type.value)
            except PersistenceError as e:
                logger.error("Failed to fetch historical pattern: %s", e)
                continue
            if pattern is not None:
                patterns.append(pattern)
    return patterns
