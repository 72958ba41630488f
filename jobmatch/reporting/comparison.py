"""
Side-by-side comparison of two candidates for the same job.
"""

from dataclasses import dataclass
from typing import Optional

from jobmatch.core.errors import InvalidInput
from jobmatch.core.models import AnalysisReport, MatchRecord


@dataclass(frozen=True)
class DimensionComparison:
    """Absolute difference and leader for one score dimension."""
    name: str
    first: int
    second: int
    difference: int
    # candidate_id of the higher scorer, None on a tie
    leader: Optional[str]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "first": self.first,
            "second": self.second,
            "difference": self.difference,
            "leader": self.leader,
        }


@dataclass(frozen=True)
class CandidateComparison:
    first_id: str
    second_id: str
    overall: DimensionComparison
    required_skills: DimensionComparison
    preferred_skills: DimensionComparison
    experience: DimensionComparison
    unique_strengths_first: tuple[str, ...] = ()
    unique_strengths_second: tuple[str, ...] = ()
    shared_strengths: tuple[str, ...] = ()

    @property
    def dimensions(self) -> tuple[DimensionComparison, ...]:
        return (self.overall, self.required_skills, self.preferred_skills, self.experience)

    def to_dict(self) -> dict:
        return {
            "candidates": [self.first_id, self.second_id],
            "overall": self.overall.to_dict(),
            "required_skills": self.required_skills.to_dict(),
            "preferred_skills": self.preferred_skills.to_dict(),
            "experience": self.experience.to_dict(),
            "unique_strengths": {
                self.first_id: list(self.unique_strengths_first),
                self.second_id: list(self.unique_strengths_second),
            },
            "shared_strengths": list(self.shared_strengths),
        }


def _compare(name: str, first: MatchRecord, second: MatchRecord, a: int, b: int) -> DimensionComparison:
    if a > b:
        leader = first.candidate_id
    elif b > a:
        leader = second.candidate_id
    else:
        leader = None
    return DimensionComparison(name=name, first=a, second=b, difference=abs(a - b), leader=leader)


def compare_candidates(first: MatchRecord, second: MatchRecord) -> CandidateComparison:
    """
    Compare two scored candidates.

    Raises:
        InvalidInput: If either record has no report
    """
    for record in (first, second):
        if record.report is None:
            raise InvalidInput(f"Candidate {record.candidate_id} has no match report to compare")

    r1, r2 = first.report, second.report
    strengths1 = r1.strengths if isinstance(r1, AnalysisReport) else ()
    strengths2 = r2.strengths if isinstance(r2, AnalysisReport) else ()

    return CandidateComparison(
        first_id=first.candidate_id,
        second_id=second.candidate_id,
        overall=_compare("overall", first, second, r1.match_percentage, r2.match_percentage),
        required_skills=_compare(
            "required_skills", first, second,
            r1.required_skills_match_percentage, r2.required_skills_match_percentage,
        ),
        preferred_skills=_compare(
            "preferred_skills", first, second,
            r1.preferred_skills_match_percentage, r2.preferred_skills_match_percentage,
        ),
        experience=_compare(
            "experience", first, second,
            r1.experience_relevance_percentage, r2.experience_relevance_percentage,
        ),
        unique_strengths_first=tuple(s for s in strengths1 if s not in strengths2),
        unique_strengths_second=tuple(s for s in strengths2 if s not in strengths1),
        shared_strengths=tuple(s for s in strengths1 if s in strengths2),
    )
