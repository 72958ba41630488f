"""
Pytest configuration and shared fixtures for the jobmatch tests.
"""
import json
import threading

import pytest

from jobmatch.core.models import EducationEntry, JobPosting, ResumeProfile
from jobmatch.integrations.base import AnalysisClient


class FakeAnalysisClient(AnalysisClient):
    """Scripted collaborator: returns (or raises) one queued item per call."""

    def __init__(self, replies=None, api_key="test-key", model=None):
        super().__init__(api_key=api_key, model=model)
        self.replies = list(replies or [])
        self.calls = []
        self._lock = threading.Lock()

    @property
    def name(self):
        return "fake"

    @property
    def default_model(self):
        return "fake-model"

    def complete(self, system_prompt, user_prompt, timeout):
        with self._lock:
            self.calls.append({"system": system_prompt, "user": user_prompt, "timeout": timeout})
            reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


def analysis_payload(**overrides):
    payload = {
        "matchPercentage": 85,
        "summary": "Strong frontend candidate.",
        "requiredSkillsMatch": 100,
        "preferredSkillsMatch": 50,
        "matchingSkills": ["JavaScript", "React"],
        "missingRequiredSkills": [],
        "experienceRelevance": 80,
        "experienceAnalysis": "Relevant product work.",
        "strengths": ["React", "Testing"],
        "weaknesses": ["No backend"],
        "suggestedInterviewQuestions": ["Describe a hard bug."],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def fake_client_class():
    return FakeAnalysisClient


@pytest.fixture
def valid_reply():
    """A well-formed analysis reply as raw JSON text."""
    return json.dumps(analysis_payload())


@pytest.fixture
def make_payload():
    return analysis_payload


@pytest.fixture
def frontend_resume():
    return ResumeProfile(
        technical=("JavaScript", "React", "Node.js"),
        soft=("Communication",),
        experience_descriptions=("Frontend Engineer building React apps with a small team",),
        education_entries=(EducationEntry(degree="Bachelor of Science", field="Computer Science"),),
        years_of_experience_band="3-5",
    )


@pytest.fixture
def frontend_job():
    return JobPosting(
        title="Frontend Engineer",
        required_skills=("JavaScript", "React"),
        preferred_skills=("Node.js",),
        description_text="Build web apps with JavaScript and React in an agile team.",
        requirements_text="Bachelor degree and 3+ years of experience.",
        required_experience_band="3-5",
        education_level="bachelor",
    )


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document under tmp_path and return its path."""
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def no_api_keys(monkeypatch):
    """Keep real credentials from the environment out of every test."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
