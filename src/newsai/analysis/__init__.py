"""Per-article AI analysis."""

from newsai.analysis.analyzer import AnalysisOutcome, ArticleAnalyzer, BulkAnalysisResult
from newsai.analysis.history import HISTORICAL_EVENT_CANDIDATES, lookup_historical_patterns
from newsai.analysis.parser import extract_json_object, parse_analysis_response
from newsai.analysis.prompt import build_analysis_prompt
from newsai.analysis.synthesizer import RecommendationSynthesizer, SynthesisResult, risk_level_for

__all__ = [
    "HISTORICAL_EVENT_CANDIDATES",
    "AnalysisOutcome",
    "ArticleAnalyzer",
    "BulkAnalysisResult",
    "RecommendationSynthesizer",
    "SynthesisResult",
    "build_analysis_prompt",
    "extract_json_object",
    "lookup_historical_patterns",
    "parse_analysis_response",
    "risk_level_for",
]
