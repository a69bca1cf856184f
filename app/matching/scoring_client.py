from __future__ import annotations

import logging
from typing import Iterable

from app.ai.types import AIClient, ChatMessage
from app.core.errors import TransportError
from app.core.matching_config import get_matching_value
from app.matching.language import NO_OVERLAP_FACTOR
from app.matching.response_parser import Parsed, recover_payload
from app.schemas.matching import JobPosting, MatchResult, format_percentage

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a precise resume-to-job matcher. "
    "You answer with a single JSON object and nothing else: "
    "no Markdown fences, no LaTeX, no commentary before or after the object."
)


def build_match_messages(resume_text: str, job: JobPosting) -> list[ChatMessage]:
    resume_budget = int(get_matching_value("oracle.resume_char_budget", 1500))
    description_budget = int(get_matching_value("oracle.description_char_budget", 1200))
    resume = (resume_text or "")[:resume_budget]
    description = (job.description or "")[:description_budget]

    user = (
        "Evaluate how well the RESUME matches the JOB.\n"
        "1. Identify 5-10 key requirements (skills, tools, experience, qualifications) from the job description.\n"
        "2. For each requirement, judge whether the resume shows it.\n"
        "3. Return ONLY this JSON object:\n"
        '{"score": <number between 0 and 1>, "matchPercentage": "<N>%", '
        '"matchingKeywords": [<3-5 requirement keywords the resume satisfies>], '
        '"keySkills": [<the 5 most important skills for the job>]}\n\n'
        f"RESUME:\n{resume}\n\n"
        f"JOB:\nTitle: {job.title}\nCompany: {job.company}\nLocation: {job.location}\n"
        f"Description: {description}"
    )
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=user),
    ]


def language_blocked_result(job: JobPosting, requirements: Iterable[str], language_match: float) -> MatchResult:
    return MatchResult.from_posting(
        job,
        score=NO_OVERLAP_FACTOR,
        match_percentage=format_percentage(NO_OVERLAP_FACTOR * 100),
        language_requirements=sorted(requirements),
        language_match=language_match,
    )


def unparsed_result(job: JobPosting, requirements: Iterable[str], language_match: float) -> MatchResult:
    score = NO_OVERLAP_FACTOR * language_match
    return MatchResult.from_posting(
        job,
        score=round(score, 2),
        match_percentage=format_percentage(score * 100),
        language_requirements=sorted(requirements),
        language_match=language_match,
    )


def transport_failure_result(job: JobPosting, requirements: Iterable[str]) -> MatchResult:
    return MatchResult.from_posting(
        job,
        score=0.0,
        match_percentage="0%",
        language_requirements=sorted(requirements),
        language_match=0.0,
    )


class ScoringClient:
    """Scores one posting against the resume through the oracle.

    Never raises for per-job problems: transport failures become a zero-score
    result and unparsable answers become the low default result, so a single
    bad job cannot abort its batch.
    """

    def __init__(self, ai_client: AIClient):
        self.ai_client = ai_client

    async def score_job(
        self,
        resume_text: str,
        job: JobPosting,
        *,
        language_match: float,
        language_requirements: Iterable[str],
    ) -> MatchResult:
        requirements = sorted(language_requirements)
        if language_match <= NO_OVERLAP_FACTOR:
            logger.debug("oracle_skipped_language job_id=%s required=%s", job.id, requirements)
            return language_blocked_result(job, requirements, language_match)

        try:
            content = await self.ai_client.complete(build_match_messages(resume_text, job))
        except TransportError as exc:
            logger.warning("oracle_transport_failed job_id=%s: %s", job.id, exc)
            return transport_failure_result(job, requirements)
        except Exception:  # noqa: BLE001 - one provider bug must not abort the batch
            logger.exception("oracle_client_error job_id=%s", job.id)
            return transport_failure_result(job, requirements)

        outcome, failures = recover_payload(content)
        for failure in failures:
            logger.debug("oracle_parse_stage_failed job_id=%s stage=%s reason=%s", job.id, failure.stage, failure.reason)
        if not isinstance(outcome, Parsed):
            logger.info("oracle_parse_fallback job_id=%s response_len=%s", job.id, len(content or ""))
            return unparsed_result(job, requirements, language_match)

        payload = outcome.payload
        return MatchResult.from_posting(
            job,
            score=round(payload.score * language_match, 2),
            match_percentage=format_percentage((payload.match_percentage or 0.0) * language_match),
            matching_keywords=payload.matching_keywords,
            key_skills=payload.key_skills,
            language_requirements=requirements,
            language_match=language_match,
        )
