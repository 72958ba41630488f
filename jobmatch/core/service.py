"""
Caller-facing matching API.

MatchingService selects a scoring strategy by name and runs single or batch
scoring. Batches fan out over a thread pool; strategies that talk to a rate
limited collaborator are processed in small groups with a pause between them.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Sequence
import logging
import threading
import time

from .errors import AnalysisCancelled, InvalidInput
from .models import JobPosting, MatchReport, ResumeProfile
from .scorer import DeterministicScorer, rank_reports
from .taxonomy import KeywordTaxonomy


class ScoringStrategy(ABC):
    """A way of producing a MatchReport for one resume/job pair."""

    # Rate limited strategies are batched in groups with a delay between them
    rate_limited = False

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def score(
        self,
        resume: ResumeProfile,
        job: JobPosting,
        cancel_event: Optional[threading.Event] = None,
    ) -> MatchReport:
        pass


class DeterministicStrategy(ScoringStrategy):
    """Local keyword overlap scoring. Never touches the network."""

    def __init__(self, scorer: Optional[DeterministicScorer] = None):
        self.scorer = scorer or DeterministicScorer()

    @property
    def name(self) -> str:
        return "deterministic"

    def score(self, resume, job, cancel_event=None) -> MatchReport:
        return self.scorer.score(resume, job)


class ExternalStrategy(ScoringStrategy):
    """Delegates scoring to an ExternalAnalyzer."""

    rate_limited = True

    def __init__(self, analyzer):
        self.analyzer = analyzer

    @property
    def name(self) -> str:
        return "external"

    def score(self, resume, job, cancel_event=None) -> MatchReport:
        return self.analyzer.analyze(resume, job, cancel_event=cancel_event)


class MatchingService:
    """Scores resumes against jobs with a named strategy."""

    DEFAULT_STRATEGY = "deterministic"

    def __init__(
        self,
        strategies: Optional[Sequence[ScoringStrategy]] = None,
        batch_size: int = 3,
        batch_delay: float = 1.0,
        concurrency: int = 3,
    ):
        """
        Initialize the service.

        Args:
            strategies: Available strategies (default: deterministic only)
            batch_size: Group size for rate limited strategies
            batch_delay: Seconds to pause between groups of a rate limited strategy
            concurrency: Default worker count for batches
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if batch_delay < 0:
            raise ValueError("batch_delay must be >= 0")

        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.concurrency = concurrency
        self.logger = logging.getLogger(self.__class__.__name__)

        self._strategies: dict[str, ScoringStrategy] = {}
        self._factories: dict[str, Callable[[], ScoringStrategy]] = {}
        self._lock = threading.Lock()

        for strategy in strategies or [DeterministicStrategy()]:
            self.register(strategy)

    @classmethod
    def from_config(cls, config) -> "MatchingService":
        """
        Build a service from a Config.

        The external strategy is created on first use, so a missing API key
        only matters to callers that actually ask for it.
        """
        scoring = config.get_scoring_config()
        taxonomy = None
        if scoring["keywords"] or scoring["bonuses"]:
            taxonomy = KeywordTaxonomy.from_dict(scoring)

        scorer = DeterministicScorer(taxonomy=taxonomy, jitter=scoring["jitter"], seed=scoring["seed"])
        batch = config.get_batch_config()
        service = cls(
            strategies=[DeterministicStrategy(scorer)],
            batch_size=batch["batch_size"],
            batch_delay=batch["batch_delay"],
            concurrency=batch["concurrency"],
        )

        def external_factory() -> ScoringStrategy:
            from jobmatch.integrations import ExternalAnalyzer
            return ExternalStrategy(ExternalAnalyzer.from_config(config))

        service.register_factory("external", external_factory)
        return service

    def register(self, strategy: ScoringStrategy) -> None:
        """Add or replace a strategy under its own name."""
        with self._lock:
            self._strategies[strategy.name] = strategy
            self._factories.pop(strategy.name, None)

    def register_factory(self, name: str, factory: Callable[[], ScoringStrategy]) -> None:
        """Register a strategy that is only built when first requested."""
        with self._lock:
            self._factories[name] = factory

    @property
    def strategy_names(self) -> list[str]:
        return sorted(set(self._strategies) | set(self._factories))

    def get_strategy(self, name: str) -> ScoringStrategy:
        """
        Look up a strategy by name.

        Raises:
            InvalidInput: If no strategy has that name
            ConfigurationError: If a lazily built strategy is missing configuration
        """
        with self._lock:
            if name in self._strategies:
                return self._strategies[name]
            factory = self._factories.get(name)
            if factory is None:
                raise InvalidInput(f"Unknown scoring strategy '{name}'. Available: {self.strategy_names}")
            strategy = factory()
            self._strategies[name] = strategy
            del self._factories[name]
            return strategy

    def score(
        self,
        resume: ResumeProfile,
        job: JobPosting,
        strategy: str = DEFAULT_STRATEGY,
        cancel_event: Optional[threading.Event] = None,
    ) -> MatchReport:
        """Score one resume against one job."""
        return self.get_strategy(strategy).score(resume, job, cancel_event=cancel_event)

    def score_batch(
        self,
        resume: ResumeProfile,
        jobs: Sequence[JobPosting],
        strategy: str = DEFAULT_STRATEGY,
        concurrency: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
        return_exceptions: bool = False,
    ) -> list:
        """
        Score one resume against many jobs.

        Returns:
            One entry per job, in input order. With return_exceptions=True a
            failed entry holds the exception instead of a report.

        Raises:
            The first failure in input order, when return_exceptions is False
        """
        selected = self.get_strategy(strategy)
        pairs = [(resume, job) for job in jobs]
        return self._run_batch(selected, pairs, concurrency, cancel_event, return_exceptions)

    def score_candidates(
        self,
        resumes: Sequence[ResumeProfile],
        job: JobPosting,
        strategy: str = DEFAULT_STRATEGY,
        concurrency: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
        return_exceptions: bool = False,
    ) -> list:
        """Score many resumes against one job. Same contract as score_batch."""
        selected = self.get_strategy(strategy)
        pairs = [(resume, job) for resume in resumes]
        return self._run_batch(selected, pairs, concurrency, cancel_event, return_exceptions)

    def rank_jobs(
        self,
        resume: ResumeProfile,
        jobs: Sequence[JobPosting],
        strategy: str = DEFAULT_STRATEGY,
        concurrency: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> list[tuple[JobPosting, MatchReport]]:
        """Score and rank jobs, best match first."""
        reports = self.score_batch(
            resume, jobs, strategy=strategy, concurrency=concurrency, cancel_event=cancel_event
        )
        return [(jobs[i], reports[i]) for i in rank_reports(reports)]

    def _run_batch(
        self,
        strategy: ScoringStrategy,
        pairs: list[tuple[ResumeProfile, JobPosting]],
        concurrency: Optional[int],
        cancel_event: Optional[threading.Event],
        return_exceptions: bool,
    ) -> list:
        total = len(pairs)
        if not total:
            return []

        workers = self.concurrency if concurrency is None else concurrency
        if workers < 1:
            raise ValueError("concurrency must be >= 1")

        group_size = self.batch_size if strategy.rate_limited else total
        workers = min(workers, group_size)
        results: list = [None] * total

        self.logger.info(
            f"Scoring {total} pair(s) with '{strategy.name}' "
            f"(groups of {group_size}, {workers} worker(s))"
        )

        with ThreadPoolExecutor(max_workers=workers) as executor:
            for start in range(0, total, group_size):
                if start and strategy.rate_limited and self.batch_delay:
                    self._pause(cancel_event)

                end = min(start + group_size, total)
                if cancel_event is not None and cancel_event.is_set():
                    if not return_exceptions:
                        raise AnalysisCancelled(f"Batch cancelled after {start} of {total} item(s)")
                    for index in range(start, total):
                        results[index] = AnalysisCancelled("Batch cancelled")
                    break

                futures = {
                    executor.submit(strategy.score, resume, job, cancel_event): index
                    for index, (resume, job) in enumerate(pairs[start:end], start)
                }

                failed = []
                for future in as_completed(futures):
                    index = futures[future]
                    try:
                        results[index] = future.result()
                    except Exception as e:
                        self.logger.error(f"Item {index} failed with '{strategy.name}': {e}")
                        results[index] = e
                        failed.append(index)

                if failed and not return_exceptions:
                    raise results[min(failed)]

                self.logger.debug(f"Completed items {start}-{end - 1} of {total}")

        return results

    def _pause(self, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is None:
            time.sleep(self.batch_delay)
        else:
            # Returns early when cancelled; the caller checks the event next
            cancel_event.wait(self.batch_delay)
