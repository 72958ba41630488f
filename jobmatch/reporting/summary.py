"""
Per-job summary of scored candidates.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from jobmatch.core.models import AnalysisReport, MatchRecord, MatchStatus
from jobmatch.core.scorer import count_bands, round_half_up


COMMON_THEMES_LIMIT = 5


@dataclass(frozen=True)
class JobMatchSummary:
    """Statistics over the scored records of one job."""
    analyzed_count: int
    average_match_score: int
    score_distribution: dict = field(default_factory=dict)
    by_status: dict = field(default_factory=dict)
    top_candidates: tuple[MatchRecord, ...] = ()
    common_strengths: tuple[str, ...] = ()
    common_gaps: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "analyzed_count": self.analyzed_count,
            "average_match_score": self.average_match_score,
            "score_distribution": dict(self.score_distribution),
            "by_status": dict(self.by_status),
            "top_candidates": [record.to_dict() for record in self.top_candidates],
            "common_strengths": list(self.common_strengths),
            "common_gaps": list(self.common_gaps),
        }


def _most_common(items: Iterable[str], limit: int) -> tuple[str, ...]:
    # Counter.most_common keeps first-seen order among equal counts
    return tuple(item for item, _ in Counter(items).most_common(limit))


def summarize_job_matches(records: Iterable[MatchRecord], top_n: int = 5) -> JobMatchSummary:
    """
    Summarize the scored records of a job.

    Records without a report are ignored. Common strengths and gaps are taken
    from the top candidates that carry a full analysis.

    Args:
        records: Candidate records for one job
        top_n: How many top candidates to keep

    Returns:
        JobMatchSummary
    """
    if top_n < 0:
        raise ValueError("top_n must be >= 0")

    scored = [record for record in records if record.report is not None]

    if not scored:
        return JobMatchSummary(
            analyzed_count=0,
            average_match_score=0,
            score_distribution=count_bands([]),
        )

    scores = [record.match_percentage for record in scored]
    top = sorted(scored, key=lambda r: r.match_percentage, reverse=True)[:top_n]

    by_status = {}
    for status in MatchStatus:
        count = sum(1 for record in scored if record.status == status)
        if count > 0:
            by_status[status.value] = count

    analyses = [r.report for r in top if isinstance(r.report, AnalysisReport)]
    strengths = [s for report in analyses for s in report.strengths]
    gaps = [g for report in analyses for g in report.weaknesses]

    return JobMatchSummary(
        analyzed_count=len(scored),
        average_match_score=round_half_up(sum(scores) / len(scores)),
        score_distribution=count_bands(scores),
        by_status=by_status,
        top_candidates=tuple(top),
        common_strengths=_most_common(strengths, COMMON_THEMES_LIMIT),
        common_gaps=_most_common(gaps, COMMON_THEMES_LIMIT),
    )
