"""Instrument tagging for providers that do not tag articles themselves."""

from collections.abc import Iterable

from newsai.data import TrackedStock


def tag_symbols(text: str, stocks: Iterable[TrackedStock]) -> frozenset[str]:
    """Return the symbols whose ticker or display name occurs in ``text``.

    Matching is a case-insensitive substring test, so short tickers match
    liberally (``"AI"`` matches ``"said"``).

    Args:
        text: Free text, typically title plus description.
        stocks: Tracked instruments to look for.

    Returns:
        Set of matching symbols.
    """
    upper = text.upper()
    found: set[str] = set()
    for stock in stocks:
        if stock.symbol.upper() in upper or (stock.name and stock.name.upper() in upper):
            found.add(stock.symbol)
    return frozenset(found)
