"""Core models, scoring and mapping for resume/job matching."""

from .errors import (
    MatchingError,
    InvalidInput,
    MalformedResponse,
    TransportFailure,
    ConfigurationError,
    AnalysisCancelled,
)
from .models import (
    ExperienceBand,
    EducationLevel,
    MatchBand,
    MatchStatus,
    EducationEntry,
    ResumeProfile,
    JobPosting,
    MatchReport,
    AnalysisReport,
    ImprovementSuggestions,
    MatchRecord,
    classify_band,
)
from .taxonomy import KeywordTaxonomy, DEFAULT_TAXONOMY
from .scorer import DeterministicScorer, KeywordBreakdown, rank_reports, count_bands
from .mapping import ProfileMapper
from .service import MatchingService, ScoringStrategy, DeterministicStrategy, ExternalStrategy

__all__ = [
    "MatchingError",
    "InvalidInput",
    "MalformedResponse",
    "TransportFailure",
    "ConfigurationError",
    "AnalysisCancelled",
    "ExperienceBand",
    "EducationLevel",
    "MatchBand",
    "MatchStatus",
    "EducationEntry",
    "ResumeProfile",
    "JobPosting",
    "MatchReport",
    "AnalysisReport",
    "ImprovementSuggestions",
    "MatchRecord",
    "classify_band",
    "KeywordTaxonomy",
    "DEFAULT_TAXONOMY",
    "DeterministicScorer",
    "KeywordBreakdown",
    "rank_reports",
    "count_bands",
    "ProfileMapper",
    "MatchingService",
    "ScoringStrategy",
    "DeterministicStrategy",
    "ExternalStrategy",
]
