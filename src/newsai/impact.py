"""Keyword gate that keeps only market-moving news."""

from collections.abc import Iterable

from newsai.data import Article

IMPACT_KEYWORDS: tuple[str, ...] = (
    # Partnerships and M&A
    "partnership",
    "acquisition",
    "merger",
    "deal",
    "invest",
    # Legal and regulatory
    "lawsuit",
    "legal",
    "fine",
    "settlement",
    # Earnings and financials
    "earnings",
    "revenue",
    "profit",
    "loss",
    # Products
    "product launch",
    "release",
    "announce",
    # Executives
    "ceo",
    "executive",
    "resignation",
    "appointed",
    # Innovation and IP
    "breakthrough",
    "innovation",
    "patent",
    # Negative events
    "recall",
    "investigation",
    "scandal",
)


def is_high_impact(article: Article) -> bool:
    """Whether the article's title or content mentions an impact keyword."""
    text = f"{article.title} {article.content}".lower()
    return any(keyword in text for keyword in IMPACT_KEYWORDS)


def filter_high_impact(articles: Iterable[Article]) -> list[Article]:
    return [article for article in articles if is_high_impact(article)]
