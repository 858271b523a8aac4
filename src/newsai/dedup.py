"""URL-based deduplication of articles across providers."""

from collections.abc import Iterable

from newsai.data import Article


def deduplicate_articles(articles: Iterable[Article]) -> list[Article]:
    """Keep the first article seen for each URL.

    Articles without a URL are dropped. Order of first occurrence is
    preserved, so running this on its own output is a no-op.
    """
    seen_urls: set[str] = set()
    unique: list[Article] = []
    for article in articles:
        if not article.url or article.url in seen_urls:
            continue
        seen_urls.add(article.url)
        unique.append(article)
    return unique
