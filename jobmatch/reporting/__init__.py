"""
Summaries and comparisons over scored match records.
"""

from .summary import JobMatchSummary, summarize_job_matches
from .comparison import CandidateComparison, DimensionComparison, compare_candidates

__all__ = [
    "JobMatchSummary",
    "summarize_job_matches",
    "CandidateComparison",
    "DimensionComparison",
    "compare_candidates",
]
