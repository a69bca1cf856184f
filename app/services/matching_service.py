from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from app.core.errors import NoJobsError, ValidationError
from app.matching.keywords import process_resume_text
from app.matching.language import normalize_language_codes
from app.matching.orchestrator import JobRanker
from app.matching.session import MatchingSession, PageView, validate_postings
from app.parsing.resume_upload import extract_resume_text
from app.schemas.api import (
    MatchJobsResponse,
    MatchPagination,
    RankingsPageResponse,
    SessionPagination,
)
from app.schemas.matching import ProcessedResume, ResumeProfile

logger = logging.getLogger(__name__)


def build_resume_profile(processed: ProcessedResume, spoken_languages: Iterable[str] | None) -> ResumeProfile:
    return ResumeProfile(
        raw_text=processed.text,
        keywords=tuple(processed.keywords),
        spoken_languages=normalize_language_codes(spoken_languages),
    )


async def upload_resume(
    session: MatchingSession,
    resume_data: str,
    spoken_languages: Iterable[str] | None = None,
) -> ProcessedResume:
    text = await extract_resume_text(resume_data)
    processed = process_resume_text(text)
    logger.info("resume_processed tokens=%s keywords=%s", len(processed.tokens), len(processed.keywords))
    session.set_resume(build_resume_profile(processed, spoken_languages))
    return processed


async def match_jobs(
    ranker: JobRanker,
    *,
    resume_text: str,
    jobs: Sequence[Mapping[str, Any]],
    languages: Iterable[str] | None,
    start: int = 0,
    limit: int = 10,
) -> MatchJobsResponse:
    """Rank a caller-supplied job list without touching the shared session."""
    if not (resume_text or "").strip():
        raise ValidationError("Resume text is empty")
    if not jobs:
        raise ValidationError("Jobs must be a non-empty array")

    postings = validate_postings(jobs)
    if not postings:
        raise NoJobsError("No valid job listings found.")

    profile = ResumeProfile(raw_text=resume_text, spoken_languages=normalize_language_codes(languages))
    rankings = await ranker.rank(profile, postings)
    return MatchJobsResponse(
        rankings=rankings,
        pagination=MatchPagination(
            start=start,
            limit=limit,
            total=len(jobs),
            processed=len(postings),
            ranked=len(rankings),
            has_more=start + limit < len(rankings),
        ),
    )


def page_response(view: PageView) -> RankingsPageResponse:
    return RankingsPageResponse(
        job_rankings=list(view.items),
        pagination=SessionPagination(displayed=view.cursor, total=view.total, has_more=view.has_more),
    )
