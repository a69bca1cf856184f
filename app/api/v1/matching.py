import logging

from fastapi import APIRouter, Depends, Request

from app.api.v1.http_errors import get_session, raise_http_error
from app.core.errors import MatchingError
from app.core.rate_limit import rate_limit
from app.core.security import require_api_key
from app.matching.session import MatchingSession
from app.schemas.api import (
    MatchJobsRequest,
    MatchJobsResponse,
    ResumeStatusResponse,
    UploadResumeRequest,
    UploadResumeResponse,
)
from app.services.matching_service import match_jobs, upload_resume

router = APIRouter(dependencies=[Depends(require_api_key)])
logger = logging.getLogger(__name__)


@router.post("/upload-resume", response_model=UploadResumeResponse)
@rate_limit("10/minute")
async def upload_resume_endpoint(
    request: Request,
    payload: UploadResumeRequest,
    session: MatchingSession = Depends(get_session),
):
    _ = request
    logger.info("resume_upload_received length=%s", len(payload.resume_data))
    try:
        processed = await upload_resume(session, payload.resume_data, payload.spoken_languages)
    except MatchingError as exc:
        raise_http_error(exc)
    return UploadResumeResponse(processed_resume=processed)


@router.get("/resume", response_model=ResumeStatusResponse)
async def resume_status(session: MatchingSession = Depends(get_session)):
    return ResumeStatusResponse(**session.resume_status())


@router.delete("/resume", response_model=ResumeStatusResponse)
async def reset_resume(session: MatchingSession = Depends(get_session)):
    session.clear_resume()
    return ResumeStatusResponse(**session.resume_status())


@router.post("/match-jobs", response_model=MatchJobsResponse)
@rate_limit()
async def match_jobs_endpoint(request: Request, payload: MatchJobsRequest):
    logger.info("match_jobs_received jobs=%s", len(payload.jobs))
    try:
        return await match_jobs(
            request.app.state.ranker,
            resume_text=payload.resume_text,
            jobs=payload.jobs,
            languages=payload.required_languages,
            start=payload.start,
            limit=payload.limit,
        )
    except MatchingError as exc:
        raise_http_error(exc)
