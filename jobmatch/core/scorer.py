"""
Deterministic match scorer.

Computes a match percentage from keyword overlap between a job's text and a
resume, plus explainable sub-scores:
- Required / preferred skills coverage
- Matching and missing skills
- Experience band relevance

No network access and no shared state: identical inputs always give
identical reports unless unseeded jitter is enabled. Seeded jitter is drawn per resume/job pair, so it does
not depend on call order or on which thread scored the pair.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence
import hashlib
import json
import math
import random

from .models import (
    ExperienceBand,
    JobPosting,
    MatchBand,
    MatchReport,
    ResumeProfile,
    classify_band,
)
from .taxonomy import DEFAULT_TAXONOMY, KeywordTaxonomy, contains_keyword, normalize, skill_key


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


@dataclass(frozen=True)
class KeywordBreakdown:
    """How the keyword part of the match percentage was reached."""
    total_relevant: int
    matched: int
    matched_keywords: tuple[str, ...]
    base_score: int
    bonus: int
    bonus_terms: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "total_relevant": self.total_relevant,
            "matched": self.matched,
            "matched_keywords": list(self.matched_keywords),
            "base_score": self.base_score,
            "bonus": self.bonus,
            "bonus_terms": list(self.bonus_terms),
        }


class DeterministicScorer:
    """Scores resumes against job postings with a keyword/attribute overlap heuristic."""

    # The heuristic is coarse, so it never reports below MIN_SCORE or a perfect match.
    MIN_SCORE = 30
    MAX_SCORE = 98

    # Used when the job text contains no taxonomy keyword at all
    NEUTRAL_BASE_SCORE = 50

    # Experience relevance
    EXPERIENCE_STEP_PENALTY = 20
    NEUTRAL_EXPERIENCE = 50

    def __init__(
        self,
        taxonomy: Optional[KeywordTaxonomy] = None,
        jitter: int = 0,
        seed: Optional[int] = None,
    ):
        """
        Initialize the scorer.

        Args:
            taxonomy: Keyword vocabulary and bonus table (default: DEFAULT_TAXONOMY)
            jitter: Opt-in random adjustment of up to +/- jitter points. 0 disables it.
            seed: Jitter seed. With a seed each resume/job pair always gets the
                same adjustment; without one, adjustments are random per call.
        """
        if jitter < 0:
            raise ValueError("jitter must be >= 0")
        self.taxonomy = taxonomy or DEFAULT_TAXONOMY
        self.jitter = jitter
        self.seed = seed
        self._rng = random.Random() if jitter and seed is None else None

    def score(self, resume: ResumeProfile, job: JobPosting) -> MatchReport:
        """Calculate the full match report for a resume/job pair."""
        breakdown = self.keyword_breakdown(resume, job)

        adjustment = self._jitter_adjustment(resume, job) if self.jitter else 0

        match_percentage = clamp(
            breakdown.base_score + breakdown.bonus + adjustment,
            self.MIN_SCORE,
            self.MAX_SCORE,
        )

        matching, missing = self._get_skill_details(resume, job)

        return MatchReport(
            match_percentage=match_percentage,
            required_skills_match_percentage=self._skill_coverage(
                resume.technical, job.required_skills
            ),
            preferred_skills_match_percentage=self._skill_coverage(
                resume.technical, job.preferred_skills
            ),
            experience_relevance_percentage=self._calculate_experience_relevance(
                resume.years_of_experience_band, job.required_experience_band
            ),
            matching_skills=matching,
            missing_required_skills=missing,
            strategy="deterministic",
        )

    def _jitter_adjustment(self, resume: ResumeProfile, job: JobPosting) -> int:
        if self._rng is not None:
            return self._rng.randint(-self.jitter, self.jitter)

        pair = json.dumps([self.seed, resume.to_dict(), job.to_dict()], sort_keys=True)
        digest = hashlib.sha256(pair.encode("utf-8")).digest()
        return random.Random(int.from_bytes(digest[:8], "big")).randint(-self.jitter, self.jitter)

    def keyword_breakdown(self, resume: ResumeProfile, job: JobPosting) -> KeywordBreakdown:
        """Calculate the keyword base score and milestone bonuses."""
        job_corpus = self.job_corpus(job)
        resume_corpus = self.resume_corpus(resume)

        total = 0
        matched = []
        for keyword in self.taxonomy.keywords:
            if contains_keyword(job_corpus, keyword):
                total += 1
                if contains_keyword(resume_corpus, keyword):
                    matched.append(keyword)

        if total > 0:
            base_score = round_half_up(len(matched) / total * 100)
        else:
            base_score = self.NEUTRAL_BASE_SCORE

        bonus = 0
        bonus_terms = []
        for term, points in self.taxonomy.bonuses:
            if contains_keyword(job_corpus, term) and contains_keyword(resume_corpus, term):
                bonus += points
                bonus_terms.append(term)

        return KeywordBreakdown(
            total_relevant=total,
            matched=len(matched),
            matched_keywords=tuple(matched),
            base_score=base_score,
            bonus=bonus,
            bonus_terms=tuple(bonus_terms),
        )

    @staticmethod
    def job_corpus(job: JobPosting) -> str:
        return normalize(f"{job.description_text} {job.requirements_text}")

    @staticmethod
    def resume_corpus(resume: ResumeProfile) -> str:
        skills = " ".join(resume.all_skills)
        experience = " ".join(resume.experience_descriptions)
        education = " ".join(entry.text for entry in resume.education_entries)
        return normalize(f"{skills} {experience} {education}")

    def _skill_coverage(self, skills: Iterable[str], wanted: Sequence[str]) -> int:
        """Percentage of wanted skills present in skills. Nothing wanted counts as 100."""
        if not wanted:
            return 100
        have = {skill_key(s) for s in skills}
        hits = sum(1 for s in wanted if skill_key(s) in have)
        return round_half_up(hits / len(wanted) * 100)

    def _get_skill_details(
        self, resume: ResumeProfile, job: JobPosting
    ) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Matching and missing skills, spelled and ordered as in the job posting."""
        have = {skill_key(s) for s in resume.technical}

        matching = []
        seen = set()
        for skill in job.required_skills + job.preferred_skills:
            key = skill_key(skill)
            if key in have and key not in seen:
                seen.add(key)
                matching.append(skill)

        missing = tuple(s for s in job.required_skills if skill_key(s) not in have)
        return tuple(matching), missing

    def _calculate_experience_relevance(
        self,
        candidate: Optional[ExperienceBand],
        required: Optional[ExperienceBand],
    ) -> int:
        """100 for the same band, minus 20 per band of distance. Unknown is neutral."""
        if candidate is None or required is None:
            return self.NEUTRAL_EXPERIENCE
        distance = abs(candidate.ordinal - required.ordinal)
        return max(0, 100 - distance * self.EXPERIENCE_STEP_PENALTY)


def ranking_key(report: MatchReport) -> tuple[int, int, int]:
    """Sort key for ranking: overall score, then required skills, then experience."""
    return (
        report.match_percentage,
        report.required_skills_match_percentage,
        report.experience_relevance_percentage,
    )


def rank_reports(reports: Sequence[MatchReport]) -> list[int]:
    """
    Rank reports best first.

    Args:
        reports: Reports to rank

    Returns:
        Indices into reports, best match first. Full ties keep input order.
    """
    return sorted(range(len(reports)), key=lambda i: ranking_key(reports[i]), reverse=True)


def count_bands(scores: Iterable[int]) -> dict[str, int]:
    """Count scores per band, keyed by band value."""
    counts = {band.value: 0 for band in MatchBand}
    for score in scores:
        counts[classify_band(score).value] += 1
    return counts
