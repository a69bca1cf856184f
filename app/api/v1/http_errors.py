from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.core.errors import (
    ConcurrencyError,
    MatchingError,
    ResumeExtractionError,
    ValidationError,
)
from app.matching.session import MatchingSession


def raise_http_error(exc: MatchingError) -> None:
    if isinstance(exc, ValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if isinstance(exc, ConcurrencyError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if isinstance(exc, ResumeExtractionError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process resume: {exc}",
        ) from exc
    raise exc


def get_session(request: Request) -> MatchingSession:
    return request.app.state.session
