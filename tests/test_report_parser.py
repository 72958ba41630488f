"""Tests for parsing collaborator replies."""

import json

import pytest

from jobmatch.core.errors import MalformedResponse
from jobmatch.integrations.report_parser import (
    extract_json,
    parse_analysis_report,
    parse_improvement_suggestions,
)


class TestExtractJson:
    """Tests for locating the JSON object in a reply."""

    def test_bare_json(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced_json(self):
        assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}

    def test_json_inside_prose(self):
        assert extract_json('Here is the analysis: {"a": {"b": 2}} Hope it helps.') == {"a": {"b": 2}}

    def test_no_json(self):
        with pytest.raises(MalformedResponse) as exc_info:
            extract_json("I cannot help with that.")
        assert exc_info.value.raw_payload == "I cannot help with that."

    def test_non_text_reply(self):
        with pytest.raises(MalformedResponse):
            extract_json(None)


class TestParseAnalysisReport:
    """Tests for analysis report validation."""

    def test_valid_reply(self, valid_reply):
        report = parse_analysis_report(valid_reply, strategy="external:fake")

        assert report.match_percentage == 85
        assert report.required_skills_match_percentage == 100
        assert report.strengths == ("React", "Testing")
        assert report.summary == "Strong frontend candidate."
        assert report.strategy == "external:fake"
        assert report.band.value == "high"

    def test_missing_match_percentage_is_rejected(self, make_payload):
        payload = make_payload()
        del payload["matchPercentage"]
        raw = json.dumps(payload)

        with pytest.raises(MalformedResponse, match="matchPercentage") as exc_info:
            parse_analysis_report(raw)
        assert exc_info.value.raw_payload == raw

    @pytest.mark.parametrize("value", [150, -5, True, "lots", None])
    def test_invalid_percentage_is_rejected(self, make_payload, value):
        raw = json.dumps(make_payload(experienceRelevance=value))
        with pytest.raises(MalformedResponse):
            parse_analysis_report(raw)

    def test_numeric_strings_and_floats_are_accepted(self, make_payload):
        raw = json.dumps(make_payload(matchPercentage="72%", requiredSkillsMatch=66.5))
        report = parse_analysis_report(raw)
        assert report.match_percentage == 72
        assert report.required_skills_match_percentage == 67

    def test_list_fields_must_hold_strings(self, make_payload):
        raw = json.dumps(make_payload(strengths=["ok", 3]))
        with pytest.raises(MalformedResponse, match="strengths"):
            parse_analysis_report(raw)

    def test_alias_field_names(self):
        raw = json.dumps({
            "matchPercentage": 61,
            "requiredSkillsMatchPercentage": 40,
            "preferredSkillsMatchPercentage": 20,
            "experienceRelevancePercentage": 70,
        })
        report = parse_analysis_report(raw)
        assert report.required_skills_match_percentage == 40
        assert report.experience_relevance_percentage == 70
        assert report.strengths == ()

    def test_top_level_array_is_rejected(self):
        with pytest.raises(MalformedResponse):
            parse_analysis_report("[1, 2, 3]")


class TestParseImprovementSuggestions:
    """Tests for improvement suggestion validation."""

    def test_valid_reply(self):
        raw = json.dumps({
            "summaryOfGaps": "Needs cloud experience.",
            "skillSuggestions": ["AWS"],
            "resumeFormattingSuggestions": ["Lead with impact"],
            "improvementPriorities": ["AWS", "Lead with impact"],
        })
        suggestions = parse_improvement_suggestions(raw)
        assert suggestions.summary_of_gaps == "Needs cloud experience."
        assert suggestions.formatting_suggestions == ("Lead with impact",)
        assert suggestions.keyword_suggestions == ()
        assert suggestions.to_dict()["skillSuggestions"] == ["AWS"]

    def test_missing_summary_is_rejected(self):
        with pytest.raises(MalformedResponse, match="summaryOfGaps"):
            parse_improvement_suggestions('{"skillSuggestions": []}')
