"""
Core data models for the matching engine.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from .errors import InvalidInput
from .taxonomy import normalize_skills, skill_key


class ExperienceBand(Enum):
    """Years of experience, on a fixed ordinal scale."""
    ZERO_TO_ONE = "0-1"
    ONE_TO_THREE = "1-3"
    THREE_TO_FIVE = "3-5"
    FIVE_TO_TEN = "5-10"
    TEN_PLUS = "10+"

    @property
    def ordinal(self) -> int:
        return list(ExperienceBand).index(self)

    @classmethod
    def parse(cls, value: Union["ExperienceBand", str, None]) -> Optional["ExperienceBand"]:
        """Parse a band value. None or an empty string means unknown."""
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().replace(" ", "")
        if not text:
            return None
        try:
            return cls(text)
        except ValueError:
            raise InvalidInput(
                f"Invalid experience band {value!r}; expected one of "
                f"{[b.value for b in cls]}"
            ) from None


class EducationLevel(Enum):
    """Minimum education level a job asks for."""
    HIGH_SCHOOL = "high_school"
    ASSOCIATE = "associate"
    BACHELOR = "bachelor"
    MASTER = "master"
    PHD = "phd"
    CERTIFICATION = "certification"

    @classmethod
    def parse(cls, value: Union["EducationLevel", str, None]) -> Optional["EducationLevel"]:
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        try:
            return cls(text)
        except ValueError:
            raise InvalidInput(
                f"Invalid education level {value!r}; expected one of "
                f"{[e.value for e in cls]}"
            ) from None


class MatchBand(Enum):
    """Coarse classification of a match percentage."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


HIGH_BAND_THRESHOLD = 80
MEDIUM_BAND_THRESHOLD = 60


def classify_band(score: float) -> MatchBand:
    """Map a match percentage to its band. Used everywhere bands are counted."""
    if score >= HIGH_BAND_THRESHOLD:
        return MatchBand.HIGH
    if score >= MEDIUM_BAND_THRESHOLD:
        return MatchBand.MEDIUM
    return MatchBand.LOW


class MatchStatus(Enum):
    """Workflow status of a candidate/job match record."""
    PENDING = "pending"
    APPLIED = "applied"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    INTERVIEW = "interview"
    REJECTED = "rejected"
    HIRED = "hired"


@dataclass(frozen=True)
class EducationEntry:
    """One education record from a resume."""
    degree: str = ""
    field: str = ""

    @property
    def text(self) -> str:
        return f"{self.degree} {self.field}".strip()

    def to_dict(self) -> dict:
        return {"degree": self.degree, "field": self.field}


@dataclass(frozen=True)
class ResumeProfile:
    """A candidate's matchable attributes."""
    technical: tuple[str, ...] = ()
    soft: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    experience_descriptions: tuple[str, ...] = ()
    education_entries: tuple[EducationEntry, ...] = ()
    years_of_experience_band: Optional[ExperienceBand] = None

    def __post_init__(self):
        technical = normalize_skills(self.technical)
        soft = normalize_skills(self.soft)
        languages = normalize_skills(self.languages)

        categories = {"technical": technical, "soft": soft, "languages": languages}
        owner = {}
        for category, skills in categories.items():
            for skill in skills:
                key = skill_key(skill)
                if key in owner:
                    raise InvalidInput(
                        f"Skill {skill!r} appears in both {owner[key]} and {category} skills"
                    )
                owner[key] = category

        object.__setattr__(self, "technical", technical)
        object.__setattr__(self, "soft", soft)
        object.__setattr__(self, "languages", languages)
        descriptions = self.experience_descriptions or ()
        if isinstance(descriptions, str):
            descriptions = (descriptions,)
        object.__setattr__(
            self,
            "experience_descriptions",
            tuple(d for d in descriptions if d),
        )
        object.__setattr__(self, "education_entries", tuple(self.education_entries or ()))
        object.__setattr__(
            self,
            "years_of_experience_band",
            ExperienceBand.parse(self.years_of_experience_band),
        )

    @property
    def all_skills(self) -> tuple[str, ...]:
        return self.technical + self.soft + self.languages

    def to_dict(self) -> dict:
        band = self.years_of_experience_band
        return {
            "skills": {
                "technical": list(self.technical),
                "soft": list(self.soft),
                "languages": list(self.languages),
            },
            "experience": list(self.experience_descriptions),
            "education": [e.to_dict() for e in self.education_entries],
            "yearsOfExperience": band.value if band else None,
        }


@dataclass(frozen=True)
class JobPosting:
    """A job's matchable requirement set."""
    required_skills: tuple[str, ...] = ()
    preferred_skills: tuple[str, ...] = ()
    description_text: str = ""
    requirements_text: str = ""
    required_experience_band: Optional[ExperienceBand] = None
    education_level: Optional[EducationLevel] = None
    title: str = ""

    def __post_init__(self):
        object.__setattr__(self, "required_skills", normalize_skills(self.required_skills))
        object.__setattr__(self, "preferred_skills", normalize_skills(self.preferred_skills))
        object.__setattr__(self, "description_text", self.description_text or "")
        object.__setattr__(self, "requirements_text", self.requirements_text or "")
        object.__setattr__(
            self,
            "required_experience_band",
            ExperienceBand.parse(self.required_experience_band),
        )
        object.__setattr__(self, "education_level", EducationLevel.parse(self.education_level))

    def to_dict(self) -> dict:
        band = self.required_experience_band
        return {
            "title": self.title,
            "description": self.description_text,
            "requirements": self.requirements_text,
            "required_skills": list(self.required_skills),
            "preferred_skills": list(self.preferred_skills),
            "required_experience": band.value if band else None,
            "education_level": self.education_level.value if self.education_level else None,
        }


def _check_percentage(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= 100:
        raise ValueError(f"{name} must be within [0, 100], got {value}")


@dataclass(frozen=True)
class MatchReport:
    """Scoring result for one resume/job pair. Immutable once produced."""
    match_percentage: int
    required_skills_match_percentage: int
    preferred_skills_match_percentage: int
    experience_relevance_percentage: int
    matching_skills: tuple[str, ...] = ()
    missing_required_skills: tuple[str, ...] = ()
    strategy: str = "deterministic"

    def __post_init__(self):
        _check_percentage("match_percentage", self.match_percentage)
        _check_percentage("required_skills_match_percentage", self.required_skills_match_percentage)
        _check_percentage("preferred_skills_match_percentage", self.preferred_skills_match_percentage)
        _check_percentage("experience_relevance_percentage", self.experience_relevance_percentage)
        object.__setattr__(self, "matching_skills", tuple(self.matching_skills))
        object.__setattr__(self, "missing_required_skills", tuple(self.missing_required_skills))

    @property
    def band(self) -> MatchBand:
        return classify_band(self.match_percentage)

    def to_dict(self) -> dict:
        return {
            "matchPercentage": self.match_percentage,
            "requiredSkillsMatch": self.required_skills_match_percentage,
            "preferredSkillsMatch": self.preferred_skills_match_percentage,
            "experienceRelevance": self.experience_relevance_percentage,
            "matchingSkills": list(self.matching_skills),
            "missingRequiredSkills": list(self.missing_required_skills),
            "band": self.band.value,
            "strategy": self.strategy,
        }


@dataclass(frozen=True)
class AnalysisReport(MatchReport):
    """A match report extended with the narrative fields of an external analysis."""
    summary: str = ""
    experience_analysis: str = ""
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    suggested_interview_questions: tuple[str, ...] = ()

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "strengths", tuple(self.strengths))
        object.__setattr__(self, "weaknesses", tuple(self.weaknesses))
        object.__setattr__(
            self, "suggested_interview_questions", tuple(self.suggested_interview_questions)
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "summary": self.summary,
            "experienceAnalysis": self.experience_analysis,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "suggestedInterviewQuestions": list(self.suggested_interview_questions),
        })
        return data


@dataclass(frozen=True)
class ImprovementSuggestions:
    """Actionable advice for bringing a resume closer to a job."""
    summary_of_gaps: str = ""
    skill_suggestions: tuple[str, ...] = ()
    experience_suggestions: tuple[str, ...] = ()
    formatting_suggestions: tuple[str, ...] = ()
    keyword_suggestions: tuple[str, ...] = ()
    improvement_priorities: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "summaryOfGaps": self.summary_of_gaps,
            "skillSuggestions": list(self.skill_suggestions),
            "experienceSuggestions": list(self.experience_suggestions),
            "resumeFormattingSuggestions": list(self.formatting_suggestions),
            "keywordSuggestions": list(self.keyword_suggestions),
            "improvementPriorities": list(self.improvement_priorities),
        }


@dataclass(frozen=True)
class MatchRecord:
    """
    Associates a candidate/job pair with its latest report and workflow status.

    Owned by the external store; the engine only produces the report.
    """
    candidate_id: str
    job_id: str
    report: Optional[MatchReport] = None
    status: MatchStatus = MatchStatus.PENDING
    candidate_name: str = ""

    def with_report(self, report: MatchReport) -> "MatchRecord":
        """Return a copy carrying a recomputed report."""
        return replace(self, report=report)

    @property
    def match_percentage(self) -> Optional[int]:
        return self.report.match_percentage if self.report else None

    def to_dict(self) -> dict:
        return {
            "candidate_id": self.candidate_id,
            "job_id": self.job_id,
            "candidate_name": self.candidate_name,
            "status": self.status.value,
            "report": self.report.to_dict() if self.report else None,
        }
