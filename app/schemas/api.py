from __future__ import annotations

from typing import Any

from pydantic import Field

from app.schemas.matching import CamelModel, MatchResult, ProcessedResume


class UploadResumeRequest(CamelModel):
    resume_data: str = ""
    spoken_languages: list[str] = Field(default_factory=list, max_length=20)


class UploadResumeResponse(CamelModel):
    success: bool = True
    processed_resume: ProcessedResume


class ResumeStatusResponse(CamelModel):
    resume_uploaded: bool
    text_length: int = 0
    keywords_count: int = 0
    spoken_languages: list[str] = Field(default_factory=list)


class MatchJobsRequest(CamelModel):
    resume_text: str = ""
    jobs: list[dict[str, Any]] = Field(default_factory=list)
    required_languages: list[str] = Field(default_factory=list, max_length=20)
    start: int = Field(default=0, ge=0)
    limit: int = Field(default=10, ge=1, le=500)


class MatchPagination(CamelModel):
    start: int
    limit: int
    total: int
    processed: int
    ranked: int
    has_more: bool


class MatchJobsResponse(CamelModel):
    success: bool = True
    rankings: list[MatchResult]
    pagination: MatchPagination


class SetJobsRequest(CamelModel):
    jobs: list[dict[str, Any]] = Field(default_factory=list)


class SetJobsResponse(CamelModel):
    success: bool = True
    job_count: int


class StartMatchingRequest(CamelModel):
    display_batch_size: int | None = Field(default=None, ge=1, le=500)


class RevealMoreRequest(CamelModel):
    page_size: int | None = Field(default=None, ge=1, le=500)


class SessionPagination(CamelModel):
    displayed: int
    total: int
    has_more: bool


class RankingsPageResponse(CamelModel):
    success: bool = True
    job_rankings: list[MatchResult]
    pagination: SessionPagination


class SessionAckResponse(CamelModel):
    success: bool = True
    message: str


class LanguagesResponse(CamelModel):
    supported: list[str]
    default: str
