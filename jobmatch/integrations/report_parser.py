"""
Parsing of collaborator replies into report objects.
"""

from typing import Any
import json
import re

from jobmatch.core.errors import MalformedResponse
from jobmatch.core.models import AnalysisReport, ImprovementSuggestions
from jobmatch.core.report_schema import SchemaError, report_from_dict, suggestions_from_dict


_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def extract_json(raw: Any) -> Any:
    """
    Decode the JSON object in a reply.

    Accepts a bare JSON document, one wrapped in a markdown code fence, or
    prose with a single {...} block somewhere inside it.

    Raises:
        MalformedResponse: If no JSON can be recovered
    """
    if not isinstance(raw, str):
        raise MalformedResponse("Reply is not text", raw_payload=repr(raw))

    text = raw.strip()
    fenced = _FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    block = _OBJECT.search(text)
    if block:
        try:
            return json.loads(block.group(0))
        except json.JSONDecodeError:
            pass

    raise MalformedResponse("Reply does not contain a JSON object", raw_payload=raw)


def parse_analysis_report(raw: str, strategy: str = "external") -> AnalysisReport:
    """Parse a match analysis reply. Never returns a partially populated report."""
    data = extract_json(raw)
    try:
        return report_from_dict(data, strategy=strategy)
    except SchemaError as e:
        raise MalformedResponse(f"Invalid analysis report: {e}", raw_payload=raw) from e


def parse_improvement_suggestions(raw: str) -> ImprovementSuggestions:
    data = extract_json(raw)
    try:
        return suggestions_from_dict(data)
    except SchemaError as e:
        raise MalformedResponse(f"Invalid improvement suggestions: {e}", raw_payload=raw) from e
