"""
Profile Mapper - Turns stored rows and JSON documents into validated models.

Stores often keep skills, experience and education as serialized JSON text.
All of that decoding happens here, once, so the scorer only ever sees
validated ResumeProfile / JobPosting values.
"""

from pathlib import Path
from typing import Any, Union
import json

from .errors import InvalidInput
from .models import (
    EducationEntry,
    JobPosting,
    MatchRecord,
    MatchStatus,
    ResumeProfile,
)
from .report_schema import SchemaError, report_from_dict


class ProfileMapper:
    """Maps store rows and JSON files to engine models."""

    SKILL_CATEGORIES = ("technical", "soft", "languages")

    def parse_file(self, file_path: Union[str, Path]) -> Any:
        """
        Load a JSON document.

        Args:
            file_path: Path to a .json file holding one object or a list

        Returns:
            The decoded document
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if path.suffix.lower() != ".json":
            raise InvalidInput(f"Unsupported file format: {path.suffix}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidInput(f"{path.name} is not valid JSON: {e}") from e

    def load_resume(self, file_path: Union[str, Path]) -> ResumeProfile:
        return self.resume_from_dict(self._expect_object(self.parse_file(file_path), "resume"))

    def load_job(self, file_path: Union[str, Path]) -> JobPosting:
        return self.job_from_dict(self._expect_object(self.parse_file(file_path), "job"))

    def load_jobs(self, file_path: Union[str, Path]) -> list[JobPosting]:
        rows = self._rows(self.parse_file(file_path), "jobs")
        return [self.job_from_dict(self._expect_object(row, "job")) for row in rows]

    def load_resumes(self, file_path: Union[str, Path]) -> list[ResumeProfile]:
        rows = self._rows(self.parse_file(file_path), "resumes")
        return [self.resume_from_dict(self._expect_object(row, "resume")) for row in rows]

    def load_records(self, file_path: Union[str, Path]) -> list[MatchRecord]:
        rows = self._rows(self.parse_file(file_path), "records")
        return [self.record_from_dict(self._expect_object(row, "record")) for row in rows]

    def resume_from_dict(self, data: dict) -> ResumeProfile:
        """Convert a resume row to a ResumeProfile."""
        skills = self._decode(data.get("skills"), "skills")
        if isinstance(skills, dict):
            categories = {c: self._string_list(skills.get(c), f"skills.{c}") for c in self.SKILL_CATEGORIES}
        else:
            # A flat skill list is treated as technical skills
            categories = {"technical": self._string_list(skills, "skills"), "soft": [], "languages": []}

        experience = self._decode(data.get("experience", data.get("experiences")), "experience")
        descriptions = []
        for entry in self._as_list(experience, "experience"):
            if isinstance(entry, str):
                descriptions.append(entry)
            elif isinstance(entry, dict):
                text = " ".join(
                    str(entry[key]).strip() for key in ("position", "title", "description") if entry.get(key)
                )
                if text:
                    descriptions.append(text)
            else:
                raise InvalidInput(f"Invalid experience entry: {entry!r}")

        education = self._decode(data.get("education"), "education")
        entries = []
        for entry in self._as_list(education, "education"):
            if isinstance(entry, str):
                entries.append(EducationEntry(degree=entry))
            elif isinstance(entry, dict):
                entries.append(EducationEntry(
                    degree=str(entry.get("degree") or ""),
                    field=str(entry.get("field") or entry.get("field_of_study") or ""),
                ))
            else:
                raise InvalidInput(f"Invalid education entry: {entry!r}")

        band = data.get("yearsOfExperience", data.get("years_of_experience_band"))

        return ResumeProfile(
            technical=tuple(categories["technical"]),
            soft=tuple(categories["soft"]),
            languages=tuple(categories["languages"]),
            experience_descriptions=tuple(descriptions),
            education_entries=tuple(entries),
            years_of_experience_band=band,
        )

    def job_from_dict(self, data: dict) -> JobPosting:
        """Convert a job posting row to a JobPosting."""
        requirements = data.get("requirements", "")
        if isinstance(requirements, list):
            requirements = " ".join(str(r) for r in requirements)

        return JobPosting(
            title=str(data.get("title") or ""),
            description_text=str(data.get("description") or ""),
            requirements_text=str(requirements or ""),
            required_skills=tuple(self._skill_field(data.get("required_skills"), "required_skills")),
            preferred_skills=tuple(self._skill_field(data.get("preferred_skills"), "preferred_skills")),
            required_experience_band=data.get("experience_level", data.get("required_experience")),
            education_level=data.get("education_level"),
        )

    def record_from_dict(self, data: dict) -> MatchRecord:
        """Convert a stored ranking/application row to a MatchRecord."""
        for key in ("candidate_id", "job_id"):
            if not data.get(key):
                raise InvalidInput(f"Match record is missing '{key}'")

        report = None
        raw_report = self._decode(data.get("report", data.get("ai_analysis")), "report")
        if raw_report is not None:
            try:
                report = report_from_dict(raw_report)
            except SchemaError as e:
                raise InvalidInput(f"Invalid report for {data['candidate_id']}: {e}") from e

        try:
            status = MatchStatus(data.get("status") or "pending")
        except ValueError:
            raise InvalidInput(f"Invalid match status: {data.get('status')!r}") from None

        return MatchRecord(
            candidate_id=str(data["candidate_id"]),
            job_id=str(data["job_id"]),
            report=report,
            status=status,
            candidate_name=str(data.get("candidate_name") or ""),
        )

    def _skill_field(self, value: Any, name: str) -> list[str]:
        """Job skill fields may be lists, JSON text, or comma-separated text."""
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                return self._string_list(self._decode(stripped, name), name)
            return [part for part in stripped.split(",")]
        return self._string_list(value, name)

    def _decode(self, value: Any, name: str) -> Any:
        """Decode JSON-typed text fields; other values pass through."""
        if not isinstance(value, str):
            return value
        stripped = value.strip()
        if not stripped:
            return None
        if stripped[0] not in "[{":
            return value
        try:
            return json.loads(stripped)
        except json.JSONDecodeError as e:
            raise InvalidInput(f"Field '{name}' holds invalid JSON: {e}") from e

    def _as_list(self, value: Any, name: str) -> list:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise InvalidInput(f"Field '{name}' must be a list")
        return value

    def _string_list(self, value: Any, name: str) -> list[str]:
        items = self._as_list(value, name)
        if not all(isinstance(item, str) for item in items):
            raise InvalidInput(f"Field '{name}' must be a list of strings")
        return items

    def _expect_object(self, value: Any, kind: str) -> dict:
        if not isinstance(value, dict):
            raise InvalidInput(f"Expected a {kind} object, got {type(value).__name__}")
        return value

    def _rows(self, data: Any, key: str) -> list:
        """A document is a list of rows, an object wrapping one under key, or a single row."""
        if isinstance(data, dict):
            data = data.get(key, [data])
        if not isinstance(data, list):
            raise InvalidInput(f"Expected a list of {key}, got {type(data).__name__}")
        return data
