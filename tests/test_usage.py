"""Tests for Usage and APICallUsage data models."""

from newsai.data import APICallUsage, Usage


def test_api_call_usage_defaults() -> None:
    call = APICallUsage(model="test-model")
    assert call.input_tokens == 0
    assert call.output_tokens == 0


def test_api_call_usage_is_frozen() -> None:
    call = APICallUsage(model="test", input_tokens=10)
    try:
        call.input_tokens = 20  # type: ignore[misc]
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass


def test_usage_empty() -> None:
    usage = Usage()
    assert usage.api_calls == []
    assert usage.input_tokens == 0
    assert usage.output_tokens == 0
    assert usage.total_tokens == 0
    assert usage.provider_requests == 0


def test_usage_token_properties() -> None:
    usage = Usage(
        api_calls=[
            APICallUsage(model="m1", input_tokens=100, output_tokens=50),
            APICallUsage(model="m2", input_tokens=200, output_tokens=75),
        ]
    )
    assert usage.input_tokens == 300
    assert usage.output_tokens == 125
    assert usage.total_tokens == 425


def test_usage_provider_requests() -> None:
    usage = Usage(newsapi_requests=1, finnhub_requests=20, alphavantage_requests=5)
    assert usage.provider_requests == 26


def test_usage_add() -> None:
    a = Usage(api_calls=[APICallUsage(model="m", input_tokens=10)], newsapi_requests=1)
    b = Usage(api_calls=[APICallUsage(model="m", output_tokens=5)], finnhub_requests=3)
    total = a + b
    assert len(total.api_calls) == 2
    assert total.newsapi_requests == 1
    assert total.finnhub_requests == 3
    assert total.total_tokens == 15
    # Operands are untouched
    assert len(a.api_calls) == 1


def test_usage_iadd() -> None:
    total = Usage()
    total += Usage(alphavantage_requests=2)
    total += Usage(api_calls=[APICallUsage(model="m", input_tokens=7)])
    assert total.alphavantage_requests == 2
    assert total.input_tokens == 7
