from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import (
    AlreadyInProgressError,
    NoJobsError,
    NoResumeError,
    StaleRunError,
    ValidationError,
)
from app.core.matching_config import get_matching_value
from app.core.session_store import (
    ALL_JOB_RANKINGS_KEY,
    DISPLAY_INDEX_KEY,
    JOB_LISTINGS_KEY,
    JOB_RANKINGS_KEY,
    RESUME_KEY,
    InMemoryKeyValueStore,
    KeyValueStore,
)
from app.matching.orchestrator import JobRanker
from app.schemas.matching import JobPosting, MatchResult, ResumeProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageView:
    items: tuple[MatchResult, ...]
    cursor: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.cursor < self.total


def _positive(value: int | None, config_path: str, name: str) -> int:
    resolved = int(get_matching_value(config_path, 10) if value is None else value)
    if resolved < 1:
        raise ValidationError(f"{name} must be at least 1")
    return resolved


def validate_postings(postings: Iterable[JobPosting | Mapping[str, Any]]) -> list[JobPosting]:
    """Drop postings without id or title and repeated ids; keep input order."""
    valid: list[JobPosting] = []
    seen: set[str] = set()
    for raw in postings:
        try:
            job = raw if isinstance(raw, JobPosting) else JobPosting.model_validate(raw)
        except PydanticValidationError:
            logger.warning("job_posting_rejected reason=missing_id_or_title")
            continue
        if job.id in seen:
            logger.warning("job_posting_rejected reason=duplicate_id job_id=%s", job.id)
            continue
        seen.add(job.id)
        valid.append(job)
    return valid


class MatchingSession:
    """Process-wide matching state: resume, job set, ranking snapshot and display cursor.

    All mutations go through these methods. The event loop is the only writer,
    so the ``matching_in_progress`` flag is the only guard needed; a second
    ``start_matching`` while one is running fails instead of queueing.
    """

    def __init__(self, ranker: JobRanker, store: KeyValueStore | None = None):
        self.ranker = ranker
        self._store = store if store is not None else InMemoryKeyValueStore()
        self._resume: ResumeProfile | None = None
        self._jobs: tuple[JobPosting, ...] = ()
        self._snapshot: tuple[MatchResult, ...] = ()
        self._cursor = 0
        self._matching_in_progress = False
        self._job_set_generation = 0

    @property
    def resume(self) -> ResumeProfile | None:
        return self._resume

    @property
    def jobs(self) -> tuple[JobPosting, ...]:
        return self._jobs

    @property
    def snapshot(self) -> tuple[MatchResult, ...]:
        return self._snapshot

    @property
    def display_cursor(self) -> int:
        return self._cursor

    @property
    def matching_in_progress(self) -> bool:
        return self._matching_in_progress

    # persistence

    def _persist_resume(self) -> None:
        if self._resume is None:
            self._store.delete(RESUME_KEY)
        else:
            self._store.set(RESUME_KEY, self._resume.model_dump(mode="json", by_alias=True))

    def _persist_jobs(self) -> None:
        self._store.set(JOB_LISTINGS_KEY, [job.model_dump(mode="json", by_alias=True) for job in self._jobs])

    def _persist_rankings(self) -> None:
        self._store.set(
            ALL_JOB_RANKINGS_KEY,
            [result.model_dump(mode="json", by_alias=True) for result in self._snapshot],
        )
        self._store.set(
            JOB_RANKINGS_KEY,
            [result.model_dump(mode="json", by_alias=True) for result in self._snapshot[: self._cursor]],
        )
        self._store.set(DISPLAY_INDEX_KEY, self._cursor)

    def restore(self) -> None:
        """Reload state written by a previous process; unreadable entries are skipped."""
        raw_resume = self._store.get(RESUME_KEY)
        if raw_resume:
            try:
                self._resume = ResumeProfile.model_validate(raw_resume)
            except PydanticValidationError:
                logger.warning("session_restore_skipped key=%s", RESUME_KEY)

        self._jobs = tuple(validate_postings(self._store.get(JOB_LISTINGS_KEY, []) or []))

        snapshot: list[MatchResult] = []
        for raw in self._store.get(ALL_JOB_RANKINGS_KEY, []) or []:
            try:
                snapshot.append(MatchResult.model_validate(raw))
            except PydanticValidationError:
                logger.warning("session_restore_skipped key=%s", ALL_JOB_RANKINGS_KEY)
                snapshot = []
                break
        self._snapshot = tuple(snapshot)
        stored_cursor = self._store.get(DISPLAY_INDEX_KEY, 0)
        cursor = stored_cursor if isinstance(stored_cursor, int) else 0
        self._cursor = max(0, min(cursor, len(self._snapshot)))
        logger.info(
            "session_restored resume=%s jobs=%s rankings=%s cursor=%s",
            self._resume is not None,
            len(self._jobs),
            len(self._snapshot),
            self._cursor,
        )

    # resume

    def set_resume(self, profile: ResumeProfile) -> None:
        self._resume = profile
        self._persist_resume()
        logger.info("session_resume_set keywords=%s languages=%s", len(profile.keywords), sorted(profile.spoken_languages))

    def clear_resume(self) -> None:
        self._resume = None
        self._snapshot = ()
        self._cursor = 0
        self._persist_resume()
        self._persist_rankings()
        logger.info("session_resume_cleared")

    def resume_status(self) -> dict[str, Any]:
        if self._resume is None:
            return {"resume_uploaded": False}
        return {
            "resume_uploaded": True,
            "text_length": len(self._resume.raw_text),
            "keywords_count": len(self._resume.keywords),
            "spoken_languages": sorted(self._resume.spoken_languages),
        }

    # job set

    def set_job_set(self, postings: Iterable[JobPosting | Mapping[str, Any]]) -> tuple[JobPosting, ...]:
        """Replace the job set; the old snapshot is dropped even when nothing valid remains."""
        valid = validate_postings(postings)
        self._jobs = tuple(valid)
        self._snapshot = ()
        self._cursor = 0
        self._job_set_generation += 1
        self._persist_jobs()
        self._persist_rankings()
        if not valid:
            logger.info("session_jobs_set count=0")
            raise NoJobsError("No valid job listings found.")
        logger.info("session_jobs_set count=%s", len(self._jobs))
        return self._jobs

    def clear(self) -> None:
        self._jobs = ()
        self._snapshot = ()
        self._cursor = 0
        self._job_set_generation += 1
        self._persist_jobs()
        self._persist_rankings()
        logger.info("session_jobs_cleared")

    # matching and pagination

    async def start_matching(self, display_batch_size: int | None = None) -> PageView:
        if self._matching_in_progress:
            raise AlreadyInProgressError()
        self._matching_in_progress = True
        try:
            display_size = _positive(display_batch_size, "pagination.display_batch_size", "display_batch_size")
            if self._resume is None:
                raise NoResumeError()
            if not self._jobs:
                raise NoJobsError()

            generation = self._job_set_generation
            jobs = self._jobs
            logger.info("matching_run_started jobs=%s", len(jobs))
            ranked = await self.ranker.rank(self._resume, jobs)

            if generation != self._job_set_generation:
                logger.warning("matching_run_discarded reason=job_set_changed jobs=%s", len(jobs))
                raise StaleRunError()

            self._snapshot = tuple(ranked)
            self._cursor = min(display_size, len(self._snapshot))
            self._persist_rankings()
            return PageView(items=self._snapshot[: self._cursor], cursor=self._cursor, total=len(self._snapshot))
        finally:
            self._matching_in_progress = False

    def reveal_more(self, page_size: int | None = None) -> PageView:
        size = _positive(page_size, "pagination.page_size", "page_size")
        total = len(self._snapshot)
        if self._cursor >= total:
            return PageView(items=(), cursor=self._cursor, total=total)

        start = self._cursor
        self._cursor = min(start + size, total)
        self._persist_rankings()
        return PageView(items=self._snapshot[start : self._cursor], cursor=self._cursor, total=total)

    def current_page(self) -> PageView:
        return PageView(items=self._snapshot[: self._cursor], cursor=self._cursor, total=len(self._snapshot))
