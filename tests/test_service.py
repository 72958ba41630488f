"""Tests for MatchingService batching, ordering and throttling."""

import threading
import time
from unittest.mock import patch

import pytest

from jobmatch.core.errors import AnalysisCancelled, ConfigurationError, InvalidInput, TransportFailure
from jobmatch.core.models import JobPosting, MatchReport, ResumeProfile
from jobmatch.core.scorer import DeterministicScorer
from jobmatch.core.service import (
    DeterministicStrategy,
    ExternalStrategy,
    MatchingService,
    ScoringStrategy,
)
from jobmatch.integrations.analyzer import ExternalAnalyzer
from jobmatch.utils.config import Config


class RecordingStrategy(ScoringStrategy):
    """Scores a job by its title ("score-NN"), optionally failing or sleeping."""

    def __init__(self, rate_limited=False, fail_titles=(), delays=None):
        self.rate_limited = rate_limited
        self.fail_titles = set(fail_titles)
        self.delays = delays or {}
        self.seen = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    @property
    def name(self):
        return "recording"

    def score(self, resume, job, cancel_event=None):
        with self._lock:
            self.seen.append(job.title)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            delay = self.delays.get(job.title)
            if delay:
                time.sleep(delay)
            if job.title in self.fail_titles:
                raise TransportFailure(f"{job.title} failed")
            value = int(job.title.split("-")[1])
            return MatchReport(
                match_percentage=value,
                required_skills_match_percentage=value,
                preferred_skills_match_percentage=0,
                experience_relevance_percentage=0,
                strategy=self.name,
            )
        finally:
            with self._lock:
                self.active -= 1


def _jobs(*scores):
    return [JobPosting(title=f"score-{s}") for s in scores]


@pytest.fixture
def resume():
    return ResumeProfile(technical=["Python"])


class TestSingleScore:
    """Tests for MatchingService.score."""

    def test_default_strategy_is_deterministic(self, frontend_resume, frontend_job):
        service = MatchingService()
        report = service.score(frontend_resume, frontend_job)
        assert report.strategy == "deterministic"
        assert service.strategy_names == ["deterministic"]

    def test_unknown_strategy(self, frontend_resume, frontend_job):
        with pytest.raises(InvalidInput, match="embeddings"):
            MatchingService().score(frontend_resume, frontend_job, strategy="embeddings")

    def test_external_strategy(self, fake_client_class, valid_reply, frontend_resume, frontend_job):
        analyzer = ExternalAnalyzer(fake_client_class([valid_reply]))
        service = MatchingService(strategies=[DeterministicStrategy(), ExternalStrategy(analyzer)])

        report = service.score(frontend_resume, frontend_job, strategy="external")

        assert report.strategy == "external:fake"
        assert ExternalStrategy(analyzer).rate_limited

    @pytest.mark.parametrize("kwargs", [{"batch_size": 0}, {"concurrency": 0}, {"batch_delay": -1}])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValueError):
            MatchingService(**kwargs)


class TestBatch:
    """Tests for score_batch and score_candidates."""

    def test_preserves_input_order(self, resume):
        strategy = RecordingStrategy(delays={"score-10": 0.05, "score-20": 0.02})
        service = MatchingService(strategies=[strategy], concurrency=3)

        reports = service.score_batch(resume, _jobs(10, 20, 30), strategy="recording")

        assert [r.match_percentage for r in reports] == [10, 20, 30]

    def test_empty_batch(self, resume):
        assert MatchingService().score_batch(resume, []) == []

    def test_concurrency_is_bounded(self, resume):
        strategy = RecordingStrategy(delays={f"score-{s}": 0.02 for s in range(40, 50)})
        service = MatchingService(strategies=[strategy], concurrency=2)

        service.score_batch(resume, _jobs(*range(40, 50)), strategy="recording")

        assert strategy.max_active <= 2

    def test_concurrency_override(self, resume):
        strategy = RecordingStrategy(delays={f"score-{s}": 0.02 for s in range(40, 46)})
        service = MatchingService(strategies=[strategy], concurrency=4)

        service.score_batch(resume, _jobs(*range(40, 46)), strategy="recording", concurrency=1)

        assert strategy.max_active == 1

    def test_zero_concurrency_override_rejected(self, resume):
        service = MatchingService(strategies=[RecordingStrategy()])
        with pytest.raises(ValueError, match="concurrency"):
            service.score_batch(resume, _jobs(10, 20), strategy="recording", concurrency=0)

    def test_seeded_jitter_is_reproducible_across_batches(self, frontend_resume):
        jobs = [
            JobPosting(title=f"Job {i}", description_text=f"JavaScript React Python role {i}")
            for i in range(120)
        ]

        def run():
            scorer = DeterministicScorer(jitter=3, seed=1)
            service = MatchingService(strategies=[DeterministicStrategy(scorer)], concurrency=8)
            return [r.match_percentage for r in service.score_batch(frontend_resume, jobs)]

        first = run()
        for _ in range(3):
            assert run() == first

    def test_return_exceptions(self, resume):
        strategy = RecordingStrategy(fail_titles={"score-20"})
        service = MatchingService(strategies=[strategy])

        results = service.score_batch(resume, _jobs(10, 20, 30), strategy="recording", return_exceptions=True)

        assert results[0].match_percentage == 10
        assert isinstance(results[1], TransportFailure)
        assert results[2].match_percentage == 30

    def test_first_failure_in_input_order_is_raised(self, resume):
        strategy = RecordingStrategy(fail_titles={"score-20", "score-30"}, delays={"score-20": 0.05})
        service = MatchingService(strategies=[strategy])

        with pytest.raises(TransportFailure, match="score-20"):
            service.score_batch(resume, _jobs(10, 20, 30), strategy="recording")

    def test_score_candidates(self, frontend_job):
        service = MatchingService()
        resumes = [ResumeProfile(technical=["JavaScript", "React"]), ResumeProfile(technical=["Cobol"])]

        reports = service.score_candidates(resumes, frontend_job)

        assert [r.required_skills_match_percentage for r in reports] == [100, 0]


class TestRateLimiting:
    """Tests for grouped processing of rate limited strategies."""

    @patch("jobmatch.core.service.time.sleep")
    def test_groups_with_delay(self, mock_sleep, resume):
        strategy = RecordingStrategy(rate_limited=True)
        service = MatchingService(strategies=[strategy], batch_size=2, batch_delay=1.5, concurrency=5)

        reports = service.score_batch(resume, _jobs(10, 20, 30, 40, 50), strategy="recording")

        assert [r.match_percentage for r in reports] == [10, 20, 30, 40, 50]
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.5, 1.5]
        assert strategy.max_active <= 2

    @patch("jobmatch.core.service.time.sleep")
    def test_no_delay_for_unthrottled_strategy(self, mock_sleep, resume):
        service = MatchingService(strategies=[RecordingStrategy()], batch_size=2, batch_delay=1.5)
        service.score_batch(resume, _jobs(10, 20, 30, 40, 50), strategy="recording")
        mock_sleep.assert_not_called()

    @patch("jobmatch.core.service.time.sleep")
    def test_failure_skips_later_groups(self, mock_sleep, resume):
        strategy = RecordingStrategy(rate_limited=True, fail_titles={"score-10"})
        service = MatchingService(strategies=[strategy], batch_size=2)

        with pytest.raises(TransportFailure):
            service.score_batch(resume, _jobs(10, 20, 30, 40), strategy="recording")

        assert sorted(strategy.seen) == ["score-10", "score-20"]

    def test_cancel_between_groups(self, resume):
        strategy = RecordingStrategy(rate_limited=True)
        service = MatchingService(strategies=[strategy], batch_size=2, batch_delay=30)
        event = threading.Event()
        event.set()

        with pytest.raises(AnalysisCancelled):
            service.score_batch(resume, _jobs(10, 20, 30), strategy="recording", cancel_event=event)
        assert strategy.seen == []

    def test_cancel_with_return_exceptions(self, resume):
        strategy = RecordingStrategy(rate_limited=True)
        service = MatchingService(strategies=[strategy], batch_size=2, batch_delay=30)
        event = threading.Event()
        event.set()

        results = service.score_batch(
            resume, _jobs(10, 20, 30), strategy="recording", cancel_event=event, return_exceptions=True
        )
        assert all(isinstance(r, AnalysisCancelled) for r in results)


class TestRankJobs:
    """Tests for rank_jobs."""

    def test_best_first(self, resume):
        service = MatchingService(strategies=[RecordingStrategy()])
        jobs = _jobs(40, 90, 65)

        ranked = service.rank_jobs(resume, jobs, strategy="recording")

        assert [job.title for job, _ in ranked] == ["score-90", "score-65", "score-40"]
        assert ranked[0][1].match_percentage == 90


class TestFromConfig:
    """Tests for MatchingService.from_config."""

    def test_settings_from_config(self, tmp_path):
        config = Config(str(tmp_path / "config.json"))
        config.set("batch.batch_size", 5)
        config.set("batch.batch_delay_seconds", 0.5)
        config.set("scoring.keywords", ["cobol"])

        service = MatchingService.from_config(config)

        assert service.batch_size == 5
        assert service.batch_delay == 0.5
        assert service.strategy_names == ["deterministic", "external"]
        assert service.get_strategy("deterministic").scorer.taxonomy.keywords == ("cobol",)

    def test_external_strategy_is_built_lazily(self, tmp_path, frontend_resume, frontend_job):
        config = Config(str(tmp_path / "config.json"))

        service = MatchingService.from_config(config)
        assert service.score(frontend_resume, frontend_job).strategy == "deterministic"

        with pytest.raises(ConfigurationError):
            service.score(frontend_resume, frontend_job, strategy="external")
