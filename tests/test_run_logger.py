"""Tests for RunLogger and serialization helpers."""

import json
import uuid
from datetime import UTC, datetime
from pathlib import Path

from newsai.data import APICallUsage, Article, EventType, Usage
from newsai.run_logger import RunLogger, _serialize

# -- _serialize tests --


def test_serialize_none() -> None:
    assert _serialize(None) is None


def test_serialize_primitive() -> None:
    assert _serialize(42) == 42
    assert _serialize("hello") == "hello"
    assert _serialize(True) is True


def test_serialize_containers() -> None:
    assert _serialize([1, "two", None]) == [1, "two", None]
    assert _serialize({"a": 1}) == {"a": 1}
    assert _serialize(frozenset({"b", "a"})) == ["a", "b"]


def test_serialize_article() -> None:
    article = Article(
        title="Title",
        url="https://example.com/1",
        source="Example",
        published_at=datetime(2024, 1, 15, tzinfo=UTC),
        related_symbols=frozenset({"MSFT", "AAPL"}),
    )
    result = _serialize(article)
    assert result["url"] == "https://example.com/1"
    assert result["published_at"] == "2024-01-15T00:00:00+00:00"
    assert result["related_symbols"] == ["AAPL", "MSFT"]
    json.dumps(result)


def test_serialize_scalars() -> None:
    article_id = uuid.uuid4()
    assert _serialize(article_id) == str(article_id)
    assert _serialize(EventType.EARNINGS) == "earnings"
    assert _serialize(Path("/some/path")) == "/some/path"


def test_serialize_usage_includes_computed_properties() -> None:
    usage = Usage(
        api_calls=[
            APICallUsage(model="m1", input_tokens=100, output_tokens=50),
            APICallUsage(model="m2", input_tokens=200, output_tokens=75),
        ],
        newsapi_requests=1,
        finnhub_requests=20,
        alphavantage_requests=5,
    )
    result = _serialize(usage)
    assert result["input_tokens"] == 300
    assert result["output_tokens"] == 125
    assert result["newsapi_requests"] == 1
    assert result["finnhub_requests"] == 20
    assert result["alphavantage_requests"] == 5
    assert len(result["api_calls"]) == 2


# -- RunLogger disabled tests --


def test_run_logger_disabled_is_noop(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=False)
    assert not logger.enabled

    logger.start_run("manual")
    logger.log_stage("fetch", "newsapi", None, [], None, 1.0)
    result = logger.finish_run({"success": True}, None)

    assert result is None
    assert logger.last_log_path is None
    assert list(tmp_path.iterdir()) == []


# -- RunLogger enabled tests --


def test_run_logger_records_stages(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)
    logger.start_run("cron")
    logger.log_stage(
        stage="fetch",
        component="finnhub",
        input_data={"symbols": 20},
        output_data={"article_count": 40},
        usage=Usage(finnhub_requests=20),
        duration_seconds=2.5,
    )
    logger.log_stage(
        stage="deduplication",
        component="url_dedup",
        input_data={"article_count": 40},
        output_data={"article_count": 31},
        usage=None,
        duration_seconds=0.001,
    )
    path = logger.finish_run(
        {"success": True, "saved": 12, "analyzed": 10, "duration_seconds": 3.2},
        Usage(finnhub_requests=20),
    )

    assert path is not None
    data = json.loads(path.read_text())
    assert data["trigger"] == "cron"
    assert data["completed_at"] is not None
    assert [s["stage"] for s in data["stages"]] == ["fetch", "deduplication"]
    assert data["stages"][0]["usage"]["finnhub_requests"] == 20
    assert data["stages"][0]["duration_seconds"] == 2.5
    assert data["stages"][1]["usage"] is None
    assert data["summary"]["saved"] == 12
    assert data["total_usage"]["finnhub_requests"] == 20


def test_run_logger_creates_log_dir(tmp_path: Path) -> None:
    log_dir = tmp_path / "nested" / "runs"
    logger = RunLogger(log_dir=log_dir)
    logger.start_run("manual")
    assert logger.finish_run({}, None) is not None
    assert log_dir.exists()


def test_run_logger_filename_format(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)
    logger.start_run("manual")
    path = logger.finish_run({}, None)

    assert path is not None
    assert path.name.startswith("run_")
    assert path.name.endswith(".json")
    assert ":" not in path.name


def test_consecutive_runs_write_separate_files(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)
    paths = []
    for _ in range(2):
        logger.start_run("manual")
        paths.append(logger.finish_run({}, None))
    assert paths[0] != paths[1]
    assert len(list(tmp_path.iterdir())) == 2


def test_run_logger_log_stage_without_start(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)
    logger.log_stage("fetch", "newsapi", None, None, None, 1.0)
    assert logger.finish_run({}, None) is None
