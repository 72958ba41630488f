"""
External analysis collaborators (LLM-backed match reports).
"""

from .base import AnalysisClient
from .anthropic_client import AnthropicAnalysisClient
from .openai_client import ChatCompletionsClient
from .analyzer import ExternalAnalyzer, create_client
from .report_parser import extract_json, parse_analysis_report, parse_improvement_suggestions

__all__ = [
    "AnalysisClient",
    "AnthropicAnalysisClient",
    "ChatCompletionsClient",
    "ExternalAnalyzer",
    "create_client",
    "extract_json",
    "parse_analysis_report",
    "parse_improvement_suggestions",
]
