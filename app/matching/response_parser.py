"""Recovery of the oracle's match object from free-form completion text.

The oracle is asked for a bare JSON object but regularly wraps it in a LaTeX
``\\boxed{...}``, a Markdown fence, or surrounding prose. Each strategy below
gets the raw text and returns either ``Parsed`` or ``Failed``; the chain
stops at the first ``Parsed``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Callable, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from app.schemas.matching import OracleMatchPayload

_BOXED_RE = re.compile(r"\\boxed\s*\{(.*)\}", re.DOTALL)
_FENCE_RE = re.compile(r"```[a-zA-Z]*")
_GREEDY_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_FIELD_SEQUENCE_RE = re.compile(
    r"\{\s*\"score\"\s*:.*?\"matchPercentage\"\s*:.*?"
    r"\"matchingKeywords\"\s*:\s*\[.*?\]\s*,\s*"
    r"\"keySkills\"\s*:\s*\[.*?\]\s*\}",
    re.DOTALL,
)


@dataclass(frozen=True)
class Parsed:
    payload: OracleMatchPayload
    stage: str


@dataclass(frozen=True)
class Failed:
    stage: str
    reason: str


ParseOutcome = Union[Parsed, Failed]
ParseStrategy = Callable[[str], ParseOutcome]


def _load_payload(candidate: str, stage: str) -> ParseOutcome:
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        return Failed(stage=stage, reason=f"invalid json: {exc.msg}")
    if not isinstance(data, dict):
        return Failed(stage=stage, reason="json root is not an object")
    try:
        return Parsed(payload=OracleMatchPayload.model_validate(data), stage=stage)
    except PydanticValidationError as exc:
        return Failed(stage=stage, reason=f"schema mismatch: {exc.error_count()} error(s)")


def unwrap_response(text: str) -> str:
    """Strip a ``\\boxed{}`` wrapper and Markdown code fences."""
    body = text or ""
    boxed = _BOXED_RE.search(body)
    if boxed:
        body = boxed.group(1)
    return _FENCE_RE.sub("", body).strip()


def parse_outermost_object(text: str) -> ParseOutcome:
    stage = "outermost_object"
    match = _GREEDY_OBJECT_RE.search(unwrap_response(text))
    if not match:
        return Failed(stage=stage, reason="no object span")
    return _load_payload(match.group(0), stage)


def parse_field_sequence(text: str) -> ParseOutcome:
    stage = "field_sequence"
    match = _FIELD_SEQUENCE_RE.search(text or "")
    if not match:
        return Failed(stage=stage, reason="expected field sequence not found")
    return _load_payload(match.group(0), stage)


DEFAULT_STRATEGIES: tuple[ParseStrategy, ...] = (
    parse_outermost_object,
    parse_field_sequence,
)


def recover_payload(
    text: str, strategies: Sequence[ParseStrategy] = DEFAULT_STRATEGIES
) -> tuple[ParseOutcome, list[Failed]]:
    """Run strategies in order; return the final outcome and the failures seen on the way."""
    failures: list[Failed] = []
    for strategy in strategies:
        outcome = strategy(text)
        if isinstance(outcome, Parsed):
            return outcome, failures
        failures.append(outcome)
    if failures:
        return failures[-1], failures
    return Failed(stage="none", reason="no strategies configured"), failures
