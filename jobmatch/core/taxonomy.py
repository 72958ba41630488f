"""
Keyword taxonomy and text normalization used by the deterministic scorer.

Matching is plain substring containment on normalized text. There is no
stemming and no token boundary check, so "go" also matches "google".
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional


DEFAULT_KEYWORDS = (
    # Languages and frameworks
    "javascript", "react", "node", "python", "java", "c++", "sql", "nosql",
    "mongodb", "aws", "cloud", "docker", "kubernetes", "devops", "agile",
    "scrum",
    # Education and credentials
    "bachelor", "master", "phd", "degree", "certification",
    # Soft skills
    "project management", "leadership", "team", "communication",
    "problem solving",
    # Disciplines
    "full stack", "frontend", "backend", "mobile", "web", "design", "testing",
    "qa", "security", "data", "analytics", "machine learning", "ai",
    "react native", "angular", "vue", "typescript", "html", "css", "sass",
    "php", "c#", ".net", "ruby", "go", "rust", "swift", "kotlin", "flutter",
    "android", "ios",
    # Tools
    "excel", "word", "powerpoint", "blockchain", "crypto", "networking",
    "linux", "windows", "macos", "git", "github", "gitlab", "jira",
    "confluence", "slack", "figma", "sketch", "adobe", "photoshop",
    "illustrator", "indesign", "xd", "ui", "ux",
    # Business functions
    "research", "sales", "marketing", "finance", "accounting", "hr",
    "operations", "product",
    # Seniority
    "manager", "senior", "junior", "lead", "director", "vp", "ceo", "cto",
    "cfo", "coo",
    # Infrastructure
    "database", "infrastructure", "automation", "ci/cd", "jenkins",
    "bitbucket", "ecommerce", "analysis", "engineering",
)

# Milestone terms rewarded when both the job and the resume mention them.
DEFAULT_BONUSES = (
    ("experience", 5),
    ("bachelor", 5),
    ("master", 7),
    ("phd", 10),
)


def normalize(text: Optional[str]) -> str:
    """Lowercase, trim and collapse whitespace. Never fails."""
    if not text:
        return ""
    return " ".join(str(text).split()).lower()


def contains_keyword(corpus: Optional[str], keyword: Optional[str]) -> bool:
    """Check whether the normalized keyword occurs anywhere in the normalized corpus."""
    needle = normalize(keyword)
    if not needle:
        return False
    return needle in normalize(corpus)


def normalize_skills(values: Optional[Iterable[str]]) -> tuple[str, ...]:
    """
    Clean a skill list.

    Entries are trimmed, empty ones dropped, and duplicates removed
    case-insensitively. The first spelling seen wins and order is kept.
    """
    if not values:
        return ()
    if isinstance(values, str):
        values = [values]

    seen = set()
    skills = []
    for value in values:
        if value is None:
            continue
        skill = " ".join(str(value).split())
        key = skill.casefold()
        if not skill or key in seen:
            continue
        seen.add(key)
        skills.append(skill)
    return tuple(skills)


def skill_key(skill: str) -> str:
    """Comparison key for a skill name."""
    return " ".join(skill.split()).casefold()


@dataclass(frozen=True)
class KeywordTaxonomy:
    """An ordered keyword vocabulary and its milestone bonus table."""
    keywords: tuple[str, ...] = DEFAULT_KEYWORDS
    bonuses: tuple[tuple[str, int], ...] = DEFAULT_BONUSES
    name: str = field(default="default", compare=False)

    def __post_init__(self):
        keywords = tuple(k for k in (normalize(k) for k in self.keywords) if k)
        bonuses = tuple((normalize(term), int(points)) for term, points in self.bonuses)
        object.__setattr__(self, "keywords", keywords)
        object.__setattr__(self, "bonuses", bonuses)

    def with_keywords(self, keywords: Iterable[str], name: str = "custom") -> "KeywordTaxonomy":
        """Return a copy using a different keyword list."""
        return KeywordTaxonomy(keywords=tuple(keywords), bonuses=self.bonuses, name=name)

    def with_bonuses(self, bonuses: dict, name: str = "custom") -> "KeywordTaxonomy":
        """Return a copy using a different bonus table."""
        return KeywordTaxonomy(keywords=self.keywords, bonuses=tuple(bonuses.items()), name=name)

    def relevant_keywords(self, corpus: str) -> list[str]:
        """Keywords present in the given corpus, in taxonomy order."""
        return [k for k in self.keywords if contains_keyword(corpus, k)]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "keywords": list(self.keywords),
            "bonuses": dict(self.bonuses),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "KeywordTaxonomy":
        """
        Build a taxonomy from configuration.

        Missing "keywords" or "bonuses" fall back to the defaults.
        """
        data = data or {}
        keywords = data.get("keywords") or DEFAULT_KEYWORDS
        bonuses = data.get("bonuses")
        bonus_items = tuple(bonuses.items()) if bonuses else DEFAULT_BONUSES
        return cls(
            keywords=tuple(keywords),
            bonuses=bonus_items,
            name=data.get("name", "default" if not data else "custom"),
        )


DEFAULT_TAXONOMY = KeywordTaxonomy()
