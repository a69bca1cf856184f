from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Iterable, Sequence, TypeVar

from app.core.matching_config import get_matching_value
from app.matching.language import (
    detect_language_requirements,
    language_match_factor,
    normalize_language_codes,
)
from app.matching.scoring_client import ScoringClient
from app.schemas.matching import JobPosting, MatchResult, ResumeProfile

logger = logging.getLogger(__name__)

T = TypeVar("T")
SleepFn = Callable[[float], Awaitable[None]]


def partition(items: Sequence[T], size: int) -> list[list[T]]:
    if size < 1:
        raise ValueError("batch size must be at least 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def sort_by_score(results: Iterable[MatchResult]) -> list[MatchResult]:
    # sorted() is stable, so equal scores keep input order
    return sorted(results, key=lambda result: result.score, reverse=True)


class JobRanker:
    """Scores every posting in fixed-size concurrent batches and returns the sorted snapshot."""

    def __init__(
        self,
        scoring_client: ScoringClient,
        *,
        batch_size: int | None = None,
        batch_delay_s: float | None = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.scoring_client = scoring_client
        self.batch_size = int(batch_size or get_matching_value("batching.batch_size", 3))
        self.batch_delay_s = float(
            get_matching_value("batching.batch_delay_s", 1.0) if batch_delay_s is None else batch_delay_s
        )
        self._sleep = sleep

    async def _score_one(
        self,
        semaphore: asyncio.Semaphore,
        resume_text: str,
        job: JobPosting,
        spoken: frozenset[str],
    ) -> MatchResult:
        required = detect_language_requirements(job.description)
        factor = language_match_factor(spoken, required)
        async with semaphore:
            return await self.scoring_client.score_job(
                resume_text,
                job,
                language_match=factor,
                language_requirements=required,
            )

    async def _score_batch(
        self,
        resume_text: str,
        batch: Sequence[JobPosting],
        spoken: frozenset[str],
    ) -> list[MatchResult]:
        semaphore = asyncio.Semaphore(self.batch_size)
        # gather keeps argument order regardless of completion order
        return list(
            await asyncio.gather(
                *(self._score_one(semaphore, resume_text, job, spoken) for job in batch)
            )
        )

    async def rank(
        self,
        profile: ResumeProfile,
        jobs: Sequence[JobPosting],
        spoken_languages: Iterable[str] | None = None,
    ) -> list[MatchResult]:
        spoken = normalize_language_codes(
            profile.spoken_languages if spoken_languages is None else spoken_languages
        )
        batches = partition(jobs, self.batch_size)
        started = time.perf_counter()
        results: list[MatchResult] = []

        for index, batch in enumerate(batches, start=1):
            results.extend(await self._score_batch(profile.raw_text, batch, spoken))
            logger.info("matching_batch_done batch=%s/%s scored=%s", index, len(batches), len(results))
            if index < len(batches) and self.batch_delay_s > 0:
                await self._sleep(self.batch_delay_s)

        ranked = sort_by_score(results)
        logger.info(
            "matching_run_done jobs=%s batches=%s latency_ms=%s",
            len(jobs),
            len(batches),
            int((time.perf_counter() - started) * 1000),
        )
        return ranked
