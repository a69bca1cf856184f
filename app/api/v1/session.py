from fastapi import APIRouter, Depends, Request

from app.api.v1.http_errors import get_session, raise_http_error
from app.core.errors import MatchingError
from app.core.rate_limit import rate_limit
from app.core.security import require_api_key
from app.matching.language import language_table, supported_languages
from app.matching.session import MatchingSession
from app.schemas.api import (
    LanguagesResponse,
    RankingsPageResponse,
    RevealMoreRequest,
    SessionAckResponse,
    SetJobsRequest,
    SetJobsResponse,
    StartMatchingRequest,
)
from app.services.matching_service import page_response

router = APIRouter(prefix="/session", dependencies=[Depends(require_api_key)])


@router.post("/jobs", response_model=SetJobsResponse)
async def set_jobs(payload: SetJobsRequest, session: MatchingSession = Depends(get_session)):
    try:
        jobs = session.set_job_set(payload.jobs)
    except MatchingError as exc:
        raise_http_error(exc)
    return SetJobsResponse(job_count=len(jobs))


@router.post("/match", response_model=RankingsPageResponse)
@rate_limit()
async def start_matching(
    request: Request,
    payload: StartMatchingRequest,
    session: MatchingSession = Depends(get_session),
):
    _ = request
    try:
        view = await session.start_matching(payload.display_batch_size)
    except MatchingError as exc:
        raise_http_error(exc)
    return page_response(view)


@router.post("/reveal", response_model=RankingsPageResponse)
async def reveal_more(payload: RevealMoreRequest, session: MatchingSession = Depends(get_session)):
    try:
        view = session.reveal_more(payload.page_size)
    except MatchingError as exc:
        raise_http_error(exc)
    return page_response(view)


@router.get("/rankings", response_model=RankingsPageResponse)
async def current_rankings(session: MatchingSession = Depends(get_session)):
    return page_response(session.current_page())


@router.post("/clear", response_model=SessionAckResponse)
async def clear_jobs(session: MatchingSession = Depends(get_session)):
    session.clear()
    return SessionAckResponse(message="Cleared existing job data")


@router.get("/languages", response_model=LanguagesResponse)
async def languages():
    return LanguagesResponse(supported=list(supported_languages()), default=language_table().default)
