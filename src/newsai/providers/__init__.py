"""News provider adapters."""

from newsai.providers.alphavantage import AlphaVantageProvider
from newsai.providers.base import NewsProvider
from newsai.providers.finnhub import FinnhubProvider
from newsai.providers.newsapi import NewsAPIProvider

__all__ = [
    "AlphaVantageProvider",
    "FinnhubProvider",
    "NewsAPIProvider",
    "NewsProvider",
]
