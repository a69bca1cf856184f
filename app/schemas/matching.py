from __future__ import annotations

import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

_PERCENT_RE = re.compile(r"-?\d+(?:\.\d+)?")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_percentage(value: float) -> str:
    return f"{round_half_up(value)}%"


def parse_percentage(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = _PERCENT_RE.search(str(value))
    if not match:
        return None
    return float(match.group(0))


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobPosting(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    company: str = "Unknown Company"
    location: str = ""
    url: str = ""
    description: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id", "title")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    @field_validator("company", mode="before")
    @classmethod
    def _default_company(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "Unknown Company"
        return value

    @field_validator("location", "url", "description", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> Any:
        return "" if value is None else value


class KeywordWeight(CamelModel):
    term: str
    weight: float


class ProcessedResume(CamelModel):
    text: str
    tokens: list[str] = Field(default_factory=list)
    keywords: list[KeywordWeight] = Field(default_factory=list)


class ResumeProfile(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    raw_text: str = Field(min_length=1)
    keywords: tuple[KeywordWeight, ...] = ()
    spoken_languages: frozenset[str] = frozenset({"en"})


class MatchResult(JobPosting):
    score: float = Field(ge=0.0, le=1.0)
    match_percentage: str
    matching_keywords: list[str] = Field(default_factory=list)
    key_skills: list[str] = Field(default_factory=list)
    language_requirements: list[str] = Field(default_factory=list)
    language_match: float = Field(ge=0.0, le=1.0)

    @classmethod
    def from_posting(cls, posting: JobPosting, **fields: Any) -> "MatchResult":
        return cls(**posting.model_dump(), **fields)


class OracleMatchPayload(CamelModel):
    """The JSON object the oracle is asked to return for one posting."""

    score: float
    match_percentage: float | None = None
    matching_keywords: list[str] = Field(default_factory=list)
    key_skills: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("score must be numeric")
        if isinstance(value, str):
            parsed = parse_percentage(value)
            if parsed is None:
                raise ValueError("score must be numeric")
            return parsed / 100.0 if value.strip().endswith("%") else parsed
        return value

    @field_validator("score")
    @classmethod
    def _clamp_score(cls, value: float) -> float:
        if math.isnan(value):
            raise ValueError("score must be a number")
        return min(1.0, max(0.0, value))

    @field_validator("match_percentage", mode="before")
    @classmethod
    def _coerce_percentage(cls, value: Any) -> Any:
        return parse_percentage(value)

    @field_validator("matching_keywords", "key_skills", mode="before")
    @classmethod
    def _coerce_terms(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [str(item).strip() for item in value if item is not None and str(item).strip()]

    @model_validator(mode="after")
    def _derive_percentage(self) -> "OracleMatchPayload":
        if self.match_percentage is None:
            self.match_percentage = float(round_half_up(self.score * 100))
        else:
            self.match_percentage = min(100.0, max(0.0, self.match_percentage))
        return self
