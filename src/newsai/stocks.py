"""Registry of tracked instruments.

The default watch list covers large-cap technology names plus a set of
growth and emerging-tech companies.
"""

from collections.abc import Iterable, Iterator

from newsai.data import Priority, TrackedStock

DEFAULT_STOCKS: tuple[TrackedStock, ...] = (
    TrackedStock("AAPL", "Apple Inc.", "tech-giant", Priority.HIGH),
    TrackedStock("MSFT", "Microsoft Corporation", "tech-giant", Priority.HIGH),
    TrackedStock("GOOGL", "Alphabet Inc.", "tech-giant", Priority.HIGH),
    TrackedStock("AMZN", "Amazon.com Inc.", "tech-giant", Priority.HIGH),
    TrackedStock("META", "Meta Platforms Inc.", "tech-giant", Priority.HIGH),
    TrackedStock("NVDA", "NVIDIA Corporation", "tech-giant", Priority.HIGH),
    TrackedStock("TSLA", "Tesla Inc.", "tech-giant", Priority.HIGH),
    TrackedStock("NFLX", "Netflix Inc.", "tech-giant", Priority.HIGH),
    TrackedStock("AMD", "Advanced Micro Devices", "semiconductor", Priority.HIGH),
    TrackedStock("INTC", "Intel Corporation", "semiconductor", Priority.MEDIUM),
    TrackedStock("CRM", "Salesforce Inc.", "enterprise-software", Priority.MEDIUM),
    TrackedStock("ORCL", "Oracle Corporation", "enterprise-software", Priority.MEDIUM),
    TrackedStock("ADBE", "Adobe Inc.", "software", Priority.MEDIUM),
    TrackedStock("CSCO", "Cisco Systems", "networking", Priority.MEDIUM),
    TrackedStock("PLTR", "Palantir Technologies", "ai-analytics", Priority.HIGH),
    TrackedStock("SNOW", "Snowflake Inc.", "cloud-data", Priority.HIGH),
    TrackedStock("DDOG", "Datadog Inc.", "cloud-monitoring", Priority.MEDIUM),
    TrackedStock("NET", "Cloudflare Inc.", "cloud-security", Priority.MEDIUM),
    TrackedStock("CRWD", "CrowdStrike Holdings", "cybersecurity", Priority.HIGH),
    TrackedStock("ZS", "Zscaler Inc.", "cybersecurity", Priority.MEDIUM),
    TrackedStock("SQ", "Block Inc. (Square)", "fintech", Priority.MEDIUM),
    TrackedStock("PYPL", "PayPal Holdings", "fintech", Priority.MEDIUM),
    TrackedStock("COIN", "Coinbase Global", "crypto", Priority.MEDIUM),
    TrackedStock("HOOD", "Robinhood Markets", "fintech", Priority.LOW),
    TrackedStock("SHOP", "Shopify Inc.", "e-commerce", Priority.HIGH),
    TrackedStock("SPOT", "Spotify Technology", "streaming", Priority.MEDIUM),
    TrackedStock("UBER", "Uber Technologies", "rideshare", Priority.MEDIUM),
    TrackedStock("ABNB", "Airbnb Inc.", "travel-tech", Priority.MEDIUM),
    TrackedStock("DASH", "DoorDash Inc.", "delivery", Priority.LOW),
    TrackedStock("TSM", "Taiwan Semiconductor", "semiconductor", Priority.HIGH),
    TrackedStock("ASML", "ASML Holding", "semiconductor-equipment", Priority.HIGH),
    TrackedStock("QCOM", "Qualcomm Inc.", "semiconductor", Priority.MEDIUM),
    TrackedStock("MU", "Micron Technology", "memory-chips", Priority.MEDIUM),
    TrackedStock("RBLX", "Roblox Corporation", "gaming-metaverse", Priority.LOW),
    TrackedStock("U", "Unity Software", "gaming-engine", Priority.LOW),
    TrackedStock("RIVN", "Rivian Automotive", "ev", Priority.LOW),
    TrackedStock("LCID", "Lucid Group", "ev", Priority.LOW),
    TrackedStock("SOFI", "SoFi Technologies", "fintech", Priority.LOW),
    TrackedStock("UPST", "Upstart Holdings", "ai-lending", Priority.LOW),
    TrackedStock("TEAM", "Atlassian Corporation", "collaboration", Priority.MEDIUM),
    TrackedStock("ZM", "Zoom Video Communications", "video-conferencing", Priority.LOW),
    TrackedStock("DOCU", "DocuSign Inc.", "e-signature", Priority.LOW),
    TrackedStock("TWLO", "Twilio Inc.", "communication-api", Priority.MEDIUM),
    TrackedStock("OKTA", "Okta Inc.", "identity-security", Priority.MEDIUM),
    TrackedStock("MDB", "MongoDB Inc.", "database", Priority.MEDIUM),
    TrackedStock("PATH", "UiPath Inc.", "automation", Priority.LOW),
    TrackedStock("AI", "C3.ai Inc.", "enterprise-ai", Priority.MEDIUM),
    TrackedStock("IONQ", "IonQ Inc.", "quantum-computing", Priority.LOW),
    TrackedStock("BROS", "Dutch Bros Inc.", "food-tech", Priority.LOW),
    TrackedStock("VUZI", "Vuzix Corporation", "ar-vr", Priority.LOW),
)


class StockRegistry:
    """Lookup over a fixed list of tracked instruments.

    Args:
        stocks: Instruments to track, in priority order for rate-limited
            providers. Duplicate symbols keep their first entry.
    """

    def __init__(self, stocks: Iterable[TrackedStock] = DEFAULT_STOCKS) -> None:
        self._stocks: dict[str, TrackedStock] = {}
        for stock in stocks:
            self._stocks.setdefault(stock.symbol, stock)

    def __iter__(self) -> Iterator[TrackedStock]:
        return iter(self._stocks.values())

    def __len__(self) -> int:
        return len(self._stocks)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._stocks

    @property
    def symbols(self) -> list[str]:
        return list(self._stocks)

    def get(self, symbol: str) -> TrackedStock | None:
        return self._stocks.get(symbol)

    def name_for(self, symbol: str) -> str | None:
        stock = self._stocks.get(symbol)
        return stock.name if stock else None

    def describe(self, symbols: Iterable[str]) -> str:
        """Format symbols as ``SYM (Name)``, comma separated, in sorted order."""
        parts = []
        for symbol in sorted(symbols):
            name = self.name_for(symbol)
            parts.append(f"{symbol} ({name})" if name else symbol)
        return ", ".join(parts)
