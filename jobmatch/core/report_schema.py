"""
Schema for serialized match reports.

Reports arrive as camelCase dictionaries, either from the external analysis
collaborator or from records a caller has stored earlier. Validation is
strict: a report is built completely or not at all.
"""

from typing import Any, Optional

from .models import AnalysisReport, ImprovementSuggestions
from .scorer import round_half_up

# Field name -> accepted keys, first match wins
PERCENTAGE_FIELDS = {
    "match_percentage": ("matchPercentage", "match_percentage"),
    "required_skills_match_percentage": (
        "requiredSkillsMatch",
        "requiredSkillsMatchPercentage",
        "required_skills_match_percentage",
    ),
    "preferred_skills_match_percentage": (
        "preferredSkillsMatch",
        "preferredSkillsMatchPercentage",
        "preferred_skills_match_percentage",
    ),
    "experience_relevance_percentage": (
        "experienceRelevance",
        "experienceRelevancePercentage",
        "experience_relevance_percentage",
    ),
}

LIST_FIELDS = {
    "matching_skills": ("matchingSkills", "matching_skills"),
    "missing_required_skills": ("missingRequiredSkills", "missing_required_skills"),
    "strengths": ("strengths",),
    "weaknesses": ("weaknesses",),
    "suggested_interview_questions": (
        "suggestedInterviewQuestions",
        "suggested_interview_questions",
    ),
}

TEXT_FIELDS = {
    "summary": ("summary",),
    "experience_analysis": ("experienceAnalysis", "experience_analysis"),
}

SUGGESTION_LIST_FIELDS = {
    "skill_suggestions": ("skillSuggestions",),
    "experience_suggestions": ("experienceSuggestions",),
    "formatting_suggestions": ("resumeFormattingSuggestions", "formattingSuggestions"),
    "keyword_suggestions": ("keywordSuggestions",),
    "improvement_priorities": ("improvementPriorities",),
}


class SchemaError(ValueError):
    """A serialized report does not match the expected schema."""


def _lookup(data: dict, keys: tuple[str, ...]) -> tuple[bool, Any]:
    for key in keys:
        if key in data:
            return True, data[key]
    return False, None


def _percentage(data: dict, name: str, keys: tuple[str, ...]) -> int:
    found, value = _lookup(data, keys)
    if not found or value is None:
        raise SchemaError(f"missing required field '{keys[0]}'")
    if isinstance(value, bool):
        raise SchemaError(f"'{keys[0]}' must be a number, got {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            raise SchemaError(f"'{keys[0]}' must be a number, got {value!r}") from None
    if not isinstance(value, (int, float)) or value != value:
        raise SchemaError(f"'{keys[0]}' must be a number, got {value!r}")
    if not 0 <= value <= 100:
        raise SchemaError(f"'{keys[0]}' must be within [0, 100], got {value}")
    return round_half_up(value)


def _string_list(data: dict, keys: tuple[str, ...]) -> tuple[str, ...]:
    found, value = _lookup(data, keys)
    if not found or value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SchemaError(f"'{keys[0]}' must be a list of strings")
    return tuple(v.strip() for v in value if v.strip())


def _text(data: dict, keys: tuple[str, ...]) -> str:
    found, value = _lookup(data, keys)
    if not found or value is None:
        return ""
    if not isinstance(value, str):
        raise SchemaError(f"'{keys[0]}' must be a string")
    return value.strip()


def report_from_dict(data: Any, strategy: Optional[str] = None) -> AnalysisReport:
    """
    Build an AnalysisReport from a serialized report.

    Args:
        data: Decoded JSON object
        strategy: Strategy name to record; defaults to the payload's "strategy"
            key, then "external"

    Returns:
        A fully populated AnalysisReport

    Raises:
        SchemaError: If a required field is missing or any field is invalid
    """
    if not isinstance(data, dict):
        raise SchemaError(f"expected a JSON object, got {type(data).__name__}")

    values = {name: _percentage(data, name, keys) for name, keys in PERCENTAGE_FIELDS.items()}
    values.update({name: _string_list(data, keys) for name, keys in LIST_FIELDS.items()})
    values.update({name: _text(data, keys) for name, keys in TEXT_FIELDS.items()})

    if strategy is None:
        stored = data.get("strategy")
        strategy = stored if isinstance(stored, str) and stored else "external"

    return AnalysisReport(strategy=strategy, **values)


def suggestions_from_dict(data: Any) -> ImprovementSuggestions:
    """Build ImprovementSuggestions from a decoded JSON object."""
    if not isinstance(data, dict):
        raise SchemaError(f"expected a JSON object, got {type(data).__name__}")
    if "summaryOfGaps" not in data:
        raise SchemaError("missing required field 'summaryOfGaps'")

    values = {name: _string_list(data, keys) for name, keys in SUGGESTION_LIST_FIELDS.items()}
    values["summary_of_gaps"] = _text(data, ("summaryOfGaps",))
    return ImprovementSuggestions(**values)
