"""Extraction and structural validation of AI analysis responses."""

import json
import logging
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from newsai.data import Action, AnalysisOutput, EventType, Impact, StockImpact, Timeframe
from newsai.errors import MalformedAnalysis

logger = logging.getLogger(__name__)


class _StockImpactPayload(BaseModel):
    symbol: str
    recommendation: Action
    impact: Impact = Impact.NEUTRAL
    rationale: str = ""
    target_change: float = 0.0
    timeframe: Timeframe = Timeframe.ONE_WEEK

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("recommendation", mode="before")
    @classmethod
    def _normalize_action(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("impact", mode="before")
    @classmethod
    def _normalize_impact(cls, v: Any) -> Any:
        try:
            return Impact(str(v).strip().lower())
        except ValueError:
            return Impact.NEUTRAL

    @field_validator("timeframe", mode="before")
    @classmethod
    def _normalize_timeframe(cls, v: Any) -> Any:
        normalized = str(v).strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return Timeframe(normalized)
        except ValueError:
            return Timeframe.ONE_WEEK

    @field_validator("target_change", mode="before")
    @classmethod
    def _parse_target_change(cls, v: Any) -> Any:
        if v is None:
            return 0.0
        if isinstance(v, str):
            return v.strip().rstrip("%")
        return v

    @field_validator("rationale", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    model_config = {"allow_inf_nan": False}


class _AnalysisPayload(BaseModel):
    event_type: EventType
    sentiment_score: float
    confidence_score: float
    affected_stocks: list[_StockImpactPayload]
    key_insights: list[str] = []
    risk_factors: list[str] = []
    historical_context: str = ""
    overall_assessment: str = ""

    @field_validator("event_type", mode="before")
    @classmethod
    def _normalize_event_type(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        try:
            return EventType(v.strip().lower())
        except ValueError:
            return EventType.OTHER

    @field_validator("affected_stocks", "key_insights", "risk_factors", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("historical_context", "overall_assessment", mode="before")
    @classmethod
    def _none_to_str(cls, v: Any) -> Any:
        return "" if v is None else v

    model_config = {"allow_inf_nan": False}


def extract_json_object(text: str) -> str:
    """Return the span from the first ``{`` to the last ``}`` in ``text``.

    Raises:
        MalformedAnalysis: If the text has no such span.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise MalformedAnalysis("No JSON found in response", raw_text=text)
    return text[start : end + 1]


def _clamp(value: float, low: float, high: float, field: str) -> float:
    if low <= value <= high:
        return value
    clamped = max(low, min(high, value))
    logger.warning("%s %.3f out of range [%g, %g], clamped to %g", field, value, low, high, clamped)
    return clamped


def parse_analysis_response(text: str) -> AnalysisOutput:
    """Parse the structured analysis from a free-form AI response.

    Prose before the first ``{`` and after the last ``}`` is ignored.
    Unknown event types become ``other``; unknown timeframes become
    ``1_week``. Sentiment is clamped to [-1, 1] and confidence to [0, 1].

    Args:
        text: Raw response text.

    Returns:
        Validated analysis output.

    Raises:
        MalformedAnalysis: If no JSON object is present, it is not valid
            JSON, or it lacks the required structure.
    """
    candidate = extract_json_object(text)
    try:
        raw = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedAnalysis(f"Invalid AI response format: {e}", raw_text=text) from e
    if not isinstance(raw, dict):
        raise MalformedAnalysis("AI response is not a JSON object", raw_text=text)

    try:
        payload = _AnalysisPayload.model_validate(raw)
    except ValidationError as e:
        raise MalformedAnalysis(
            f"AI response does not match the analysis schema: {e}", raw_text=text
        ) from e

    return AnalysisOutput(
        event_type=payload.event_type,
        sentiment_score=_clamp(payload.sentiment_score, -1.0, 1.0, "sentiment_score"),
        confidence_score=_clamp(payload.confidence_score, 0.0, 1.0, "confidence_score"),
        affected_stocks=tuple(
            StockImpact(
                symbol=s.symbol,
                recommendation=s.recommendation,
                impact=s.impact,
                rationale=s.rationale,
                target_change=s.target_change,
                timeframe=s.timeframe,
            )
            for s in payload.affected_stocks
        ),
        key_insights=tuple(payload.key_insights),
        risk_factors=tuple(payload.risk_factors),
        historical_context=payload.historical_context,
        overall_assessment=payload.overall_assessment,
    )
