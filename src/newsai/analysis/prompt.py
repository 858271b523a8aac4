"""Prompt construction for per-article analysis."""

from collections.abc import Sequence

from newsai.data import Article, HistoricalPattern
from newsai.stocks import StockRegistry

RESPONSE_SCHEMA = """\
{
  "event_type": "product-launch | acquisition | legal-issues | earnings | partnership | \
executive-change | market-expansion | other",
  "sentiment_score": <number between -1 and 1, where -1 is very negative, 0 is neutral, \
1 is very positive>,
  "confidence_score": <number between 0 and 1 indicating your confidence in this analysis>,
  "affected_stocks": [
    {
      "symbol": "STOCK_SYMBOL",
      "impact": "positive | negative | neutral",
      "recommendation": "BUY | SELL | HOLD",
      "rationale": "brief explanation why",
      "target_change": <estimated price change percentage>,
      "timeframe": "1_week | 2_weeks | 1_month"
    }
  ],
  "key_insights": [
    "bullet point 1",
    "bullet point 2",
    "bullet point 3"
  ],
  "risk_factors": [
    "risk 1",
    "risk 2"
  ],
  "historical_context": "Compare this event to similar historical events and their outcomes",
  "overall_assessment": "A 2-3 sentence summary of the trading opportunity"
}"""

GUIDELINES = """\
**Important Guidelines:**
1. Be conservative with recommendations - only suggest BUY/SELL if you're confident
2. Consider both the positive and negative aspects
3. Reference historical patterns when available
4. Provide specific, actionable insights
5. Acknowledge uncertainty and risks
6. Focus on fact-based analysis, not speculation

Respond in English. Return ONLY the JSON object, no additional text."""


def format_pattern(pattern: HistoricalPattern) -> str:
    """Render one historical pattern as a reference line."""
    return (
        f"- {pattern.symbol} during {pattern.event_type}: "
        f"Average change of {pattern.avg_price_change}% over {pattern.timeframe} "
        f"({pattern.sample_size} samples, {pattern.confidence * 100:.0f}% confidence)"
    )


def build_analysis_prompt(
    article: Article,
    stocks: StockRegistry,
    patterns: Sequence[HistoricalPattern] = (),
) -> str:
    """Build the analysis instruction for one article.

    The output depends only on the arguments, so the same article and
    patterns always produce the same prompt.

    Args:
        article: Article to analyze.
        stocks: Registry used to name the related instruments.
        patterns: Historical patterns to include as reference context.

    Returns:
        Prompt text for a single user message.
    """
    published = article.published_at.isoformat() if article.published_at else "unknown"
    related = stocks.describe(article.related_symbols) or "none identified"

    sections = [
        "You are a financial analyst AI specialized in stock market analysis. "
        "Analyze the following news article and provide structured insights.",
        "**News Article:**\n"
        f"Title: {article.title}\n"
        f"Content: {article.content}\n"
        f"Source: {article.source}\n"
        f"Published: {published}\n"
        f"Related Stocks: {related}",
        "**Your Task:**\n"
        "Analyze this article and provide a comprehensive assessment in the following "
        "JSON format:\n\n" + RESPONSE_SCHEMA,
    ]
    if patterns:
        lines = "\n".join(format_pattern(p) for p in patterns)
        sections.append(f"**Historical Reference Data:**\n{lines}")
    sections.append(GUIDELINES)
    return "\n\n".join(sections)
