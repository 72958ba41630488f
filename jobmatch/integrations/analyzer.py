"""
External match analysis with bounded retries and cooperative cancellation.
"""

from dataclasses import replace
from typing import Optional
import logging
import threading
import time

from .anthropic_client import AnthropicAnalysisClient
from .base import AnalysisClient
from .openai_client import ChatCompletionsClient
from .prompts import build_analysis_prompt, build_improvement_prompt
from .report_parser import parse_analysis_report, parse_improvement_suggestions
from jobmatch.core.errors import AnalysisCancelled, ConfigurationError, TransportFailure
from jobmatch.core.taxonomy import skill_key
from jobmatch.core.models import (
    AnalysisReport,
    ImprovementSuggestions,
    JobPosting,
    MatchReport,
    ResumeProfile,
)


class ExternalAnalyzer:
    """
    Produces AnalysisReports by asking an external text-generation collaborator.

    Transport failures marked retryable are retried with exponential backoff
    up to max_retries times. Authentication and other client errors fail on
    the first attempt. A malformed reply is never retried.
    """

    MAX_BACKOFF = 30.0

    def __init__(
        self,
        client: AnalysisClient,
        timeout: float = 30,
        max_retries: int = 2,
        backoff: float = 1.0,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.client = client
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def strategy_name(self) -> str:
        return f"external:{self.client.name}"

    @classmethod
    def from_config(cls, config) -> "ExternalAnalyzer":
        settings = config.get_analysis_config()
        return cls(
            client=create_client(config),
            timeout=settings["timeout"],
            max_retries=settings["max_retries"],
            backoff=settings["backoff"],
        )

    def analyze(
        self,
        resume: ResumeProfile,
        job: JobPosting,
        cancel_event: Optional[threading.Event] = None,
    ) -> AnalysisReport:
        """
        Analyze one resume against one job.

        Raises:
            TransportFailure: After retries are exhausted, or on a non-retryable error
            MalformedResponse: If the reply does not match the report schema
            AnalysisCancelled: If cancel_event is set before a result is returned
        """
        system_prompt, user_prompt = build_analysis_prompt(resume, job)
        raw = self._call(system_prompt, user_prompt, cancel_event)
        report = self._align_skills(parse_analysis_report(raw, strategy=self.strategy_name), job)
        self.logger.info(f"{self.client.name} analysis: {report.match_percentage}% ({report.band.value})")
        return report

    def _align_skills(self, report: AnalysisReport, job: JobPosting) -> AnalysisReport:
        """
        Restrict the reported skill lists to the job's own skills.

        Entries are matched case-insensitively and rewritten in the job's
        spelling. Skills the job does not list are dropped.
        """
        job_skills = {skill_key(s): s for s in job.preferred_skills}
        job_skills.update({skill_key(s): s for s in job.required_skills})
        required = {skill_key(s): s for s in job.required_skills}

        matching = self._keep_known(report.matching_skills, job_skills, "matching")
        missing = self._keep_known(report.missing_required_skills, required, "missing required")
        return replace(report, matching_skills=matching, missing_required_skills=missing)

    def _keep_known(self, skills, known: dict, label: str) -> tuple[str, ...]:
        kept = []
        for skill in skills:
            canonical = known.get(skill_key(skill))
            if canonical is None:
                self.logger.warning(f"Dropping {label} skill {skill!r}: not listed by the job")
            elif canonical not in kept:
                kept.append(canonical)
        return tuple(kept)

    def suggest_improvements(
        self,
        resume: ResumeProfile,
        job: JobPosting,
        report: Optional[MatchReport] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ImprovementSuggestions:
        """Ask the collaborator how the resume could better fit the job."""
        system_prompt, user_prompt = build_improvement_prompt(resume, job, report)
        raw = self._call(system_prompt, user_prompt, cancel_event)
        return parse_improvement_suggestions(raw)

    def _call(
        self,
        system_prompt: str,
        user_prompt: str,
        cancel_event: Optional[threading.Event],
    ) -> str:
        attempts = self.max_retries + 1

        for attempt in range(attempts):
            self._check_cancelled(cancel_event)

            try:
                raw = self.client.complete(system_prompt, user_prompt, timeout=self.timeout)
            except TransportFailure as e:
                if not e.retryable or attempt == attempts - 1:
                    self.logger.error(f"{self.client.name} request failed after {attempt + 1} attempt(s): {e}")
                    raise

                delay = self._backoff_delay(attempt)
                self.logger.warning(
                    f"{self.client.name} request failed ({e}), retrying in {delay:.1f}s "
                    f"[{attempt + 1}/{self.max_retries}]"
                )
                self._wait(delay, cancel_event)
                continue

            # A reply that lands after cancellation is discarded
            self._check_cancelled(cancel_event)
            return raw

        raise AssertionError("unreachable")

    def _backoff_delay(self, attempt: int) -> float:
        return min(self.backoff * (2 ** attempt), self.MAX_BACKOFF)

    def _wait(self, delay: float, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is None:
            time.sleep(delay)
        elif cancel_event.wait(delay):
            raise AnalysisCancelled("Analysis cancelled while waiting to retry")

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise AnalysisCancelled("Analysis cancelled")


def create_client(config) -> AnalysisClient:
    """
    Build the analysis client named by analysis.provider in the config.

    Raises:
        ConfigurationError: If the provider is unknown or has no API key
    """
    settings = config.get_analysis_config()
    provider = settings["provider"]
    api_key = config.require_api_key(provider)

    if provider == "anthropic":
        return AnthropicAnalysisClient(
            api_key=api_key,
            model=settings["model"],
            max_tokens=settings["max_tokens"],
            temperature=settings["temperature"],
        )
    if provider == "openai":
        return ChatCompletionsClient(
            api_key=api_key,
            model=settings["model"],
            base_url=settings["base_url"],
            temperature=settings["temperature"],
        )

    raise ConfigurationError(f"Unknown analysis provider '{provider}'")
