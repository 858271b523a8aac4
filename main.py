#!/usr/bin/env python
"""CLI for the newsai aggregation and analysis pipeline."""

import argparse
import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path

from pydantic import BaseModel, field_validator

from newsai.config import (
    create_from_config,
    create_store,
    get_default_config_path,
    load_config,
)
from newsai.config.models import NewsAIConfig
from newsai.data import HistoricalPattern
from newsai.errors import NewsAIError
from newsai.logging_setup import configure_logging

logger = logging.getLogger(__name__)

SAMPLE_PATTERNS = [
    HistoricalPattern("AAPL", "product-launch", "2_weeks", 8.5, 7.2, 12, 0.75),
    HistoricalPattern("AAPL", "earnings", "1_week", 5.3, 4.8, 24, 0.82),
    HistoricalPattern("MSFT", "acquisition", "1_month", 12.1, 10.5, 8, 0.68),
    HistoricalPattern("GOOGL", "legal-issues", "2_weeks", -6.2, -5.8, 15, 0.71),
    HistoricalPattern("NVDA", "product-launch", "1_month", 15.7, 14.2, 10, 0.79),
    HistoricalPattern("META", "partnership", "2_weeks", 7.8, 6.9, 18, 0.73),
]


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: str
    config: Path
    trigger: str = "manual"
    article_id: uuid.UUID | None = None
    run_log: bool = False

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


async def run_aggregation(config: NewsAIConfig, args: CLIArgs) -> int:
    """Run one aggregation batch and print its summary."""
    services = create_from_config(config, run_log_override=args.run_log or None)
    async with services:
        summary = await services.aggregator.run(args.trigger)

    print(json.dumps(summary.to_dict(), indent=2))
    usage = summary.usage
    logger.info("Provider requests: %d", usage.provider_requests)
    logger.info("AI calls: %d", len(usage.api_calls))
    logger.info("Input tokens: %s", f"{usage.input_tokens:,}")
    logger.info("Output tokens: %s", f"{usage.output_tokens:,}")
    if services.run_logger and services.run_logger.last_log_path:
        logger.info("Run log written to: %s", services.run_logger.last_log_path)
    return 0 if summary.success else 1


async def reanalyze(config: NewsAIConfig, args: CLIArgs) -> int:
    """Analyze one stored article again and print the result."""
    if args.article_id is None:
        raise ValueError("reanalyze requires an article id")
    services = create_from_config(config)
    async with services:
        outcome = await services.aggregator.reanalyze(args.article_id)

    output = outcome.output
    print(
        json.dumps(
            {
                "article_id": str(outcome.article_id),
                "analysis_id": str(outcome.analysis_id),
                "event_type": output.event_type,
                "sentiment_score": output.sentiment_score,
                "confidence_score": output.confidence_score,
                "recommendations": [
                    {"symbol": s.symbol, "action": s.recommendation, "timeframe": s.timeframe}
                    for s in output.affected_stocks
                ],
                "tokens_used": outcome.tokens_used,
            },
            indent=2,
        )
    )
    return 0


async def seed_patterns(config: NewsAIConfig) -> int:
    """Create the schema if needed and load the sample historical patterns."""
    async with create_store(config.database) as store:
        await store.create_schema()
        for pattern in SAMPLE_PATTERNS:
            await store.upsert_historical_pattern(pattern)
    logger.info("Seeded %d historical patterns", len(SAMPLE_PATTERNS))
    return 0


async def run(args: CLIArgs) -> int:
    """Execute the selected command.

    Args:
        args: Validated CLI arguments.

    Returns:
        Process exit code.
    """
    config = load_config(args.config)
    configure_logging(config.logging.level, config.logging.log_dir)
    logger.info("Config: %s", args.config)

    if args.command == "run":
        return await run_aggregation(config, args)
    if args.command == "reanalyze":
        return await reanalyze(config, args)
    if args.command == "seed-patterns":
        return await seed_patterns(config)
    msg = f"Unknown command: {args.command}"
    raise ValueError(msg)


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Aggregate and analyze financial news.")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run_parser = sub.add_parser("run", help="Run one aggregation batch")
    run_parser.add_argument(
        "--trigger",
        default="manual",
        help="Label recorded for this run (default: manual)",
    )
    run_parser.add_argument(
        "--run-log",
        action="store_true",
        default=False,
        help="Write intermediate stage results to a JSON file",
    )

    reanalyze_parser = sub.add_parser("reanalyze", help="Analyze a stored article again")
    reanalyze_parser.add_argument("article_id", help="Id of the stored article")

    sub.add_parser("seed-patterns", help="Load sample historical patterns")

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            config=config_path,
            trigger=getattr(ns, "trigger", "manual"),
            article_id=getattr(ns, "article_id", None),
            run_log=getattr(ns, "run_log", False),
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        code = asyncio.run(run(args))
    except NewsAIError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(code)


if __name__ == "__main__":
    main()
