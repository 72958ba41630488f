"""Tests for keyword taxonomy and normalization."""

from jobmatch.core.taxonomy import (
    DEFAULT_BONUSES,
    DEFAULT_TAXONOMY,
    KeywordTaxonomy,
    contains_keyword,
    normalize,
    normalize_skills,
    skill_key,
)


class TestNormalize:
    """Tests for text normalization."""

    def test_lowercases_and_collapses_whitespace(self):
        assert normalize("  Senior   PYTHON\nDeveloper ") == "senior python developer"

    def test_empty_values(self):
        assert normalize(None) == ""
        assert normalize("") == ""

    def test_contains_keyword_is_substring_match(self):
        assert contains_keyword("Worked at Google", "go")
        assert contains_keyword("Machine   Learning engineer", "machine learning")
        assert not contains_keyword("Bake bread", "python")

    def test_empty_keyword_never_matches(self):
        assert not contains_keyword("anything", "")
        assert not contains_keyword("anything", None)


class TestNormalizeSkills:
    """Tests for skill list cleanup."""

    def test_dedupes_case_insensitively_keeping_first_spelling(self):
        assert normalize_skills(["React", " react ", "SQL", "", None, "sql"]) == ("React", "SQL")

    def test_single_string_is_one_skill(self):
        assert normalize_skills("Python") == ("Python",)

    def test_skill_key(self):
        assert skill_key("  Node.JS ") == skill_key("node.js")


class TestKeywordTaxonomy:
    """Tests for KeywordTaxonomy."""

    def test_default_taxonomy_contents(self):
        assert "javascript" in DEFAULT_TAXONOMY.keywords
        assert "machine learning" in DEFAULT_TAXONOMY.keywords
        assert DEFAULT_TAXONOMY.bonuses == DEFAULT_BONUSES
        assert dict(DEFAULT_TAXONOMY.bonuses) == {"experience": 5, "bachelor": 5, "master": 7, "phd": 10}

    def test_keywords_are_normalized(self):
        taxonomy = KeywordTaxonomy(keywords=("  Python ", "", "Machine  Learning"))
        assert taxonomy.keywords == ("python", "machine learning")

    def test_relevant_keywords_in_taxonomy_order(self):
        taxonomy = KeywordTaxonomy(keywords=("sql", "python", "rust"))
        assert taxonomy.relevant_keywords("python and sql") == ["sql", "python"]

    def test_with_keywords_keeps_bonuses(self):
        taxonomy = DEFAULT_TAXONOMY.with_keywords(["cobol"])
        assert taxonomy.keywords == ("cobol",)
        assert taxonomy.bonuses == DEFAULT_TAXONOMY.bonuses
        assert taxonomy.name == "custom"

    def test_with_bonuses(self):
        taxonomy = DEFAULT_TAXONOMY.with_bonuses({"mba": 4})
        assert taxonomy.bonuses == (("mba", 4),)

    def test_from_dict_falls_back_to_defaults(self):
        assert KeywordTaxonomy.from_dict(None) == DEFAULT_TAXONOMY
        custom = KeywordTaxonomy.from_dict({"keywords": ["cobol", "fortran"]})
        assert custom.keywords == ("cobol", "fortran")
        assert custom.bonuses == DEFAULT_BONUSES

    def test_to_dict_round_trips_through_from_dict(self):
        taxonomy = KeywordTaxonomy(keywords=("a1", "b2"), bonuses=(("x", 1),), name="mini")
        rebuilt = KeywordTaxonomy.from_dict(taxonomy.to_dict())
        assert rebuilt == taxonomy
        assert rebuilt.name == "mini"
