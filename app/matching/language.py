from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

from app.core.matching_config import get_matching_value

logger = logging.getLogger(__name__)

NO_OVERLAP_FACTOR = 0.1
PARTIAL_OVERLAP_FLOOR = 0.5


@dataclass(frozen=True)
class LanguageTable:
    default: str
    patterns: dict[str, re.Pattern[str]]
    aliases: dict[str, str]
    signal: re.Pattern[str] | None


def _is_latin(variant: str) -> bool:
    return all(ch.isascii() or "LATIN" in unicodedata.name(ch, "") for ch in variant)


def _word_pattern(variants: Iterable[str]) -> re.Pattern[str]:
    # CJK text has no word separators; only Latin-script variants are bounded
    ordered = sorted(set(variants), key=len, reverse=True)
    bounded = [re.escape(v) for v in ordered if _is_latin(v)]
    unbounded = [re.escape(v) for v in ordered if not _is_latin(v)]
    parts = []
    if bounded:
        parts.append(rf"(?<!\w)(?:{'|'.join(bounded)})(?!\w)")
    if unbounded:
        parts.append(rf"(?:{'|'.join(unbounded)})")
    return re.compile("|".join(parts), re.IGNORECASE)


@lru_cache(maxsize=1)
def language_table() -> LanguageTable:
    default = str(get_matching_value("languages.default", "en")).strip().lower() or "en"
    raw_table = get_matching_value("languages.table", {}) or {}
    patterns: dict[str, re.Pattern[str]] = {}
    aliases: dict[str, str] = {}
    for code, variants in raw_table.items():
        code_key = str(code).strip().lower()
        clean = [str(v).strip().lower() for v in (variants or []) if str(v).strip()]
        if not clean:
            continue
        patterns[code_key] = _word_pattern(clean)
        aliases[code_key] = code_key
        for variant in clean:
            aliases[variant] = code_key

    phrases = [str(p).strip().lower() for p in get_matching_value("languages.signal_phrases", []) or [] if str(p).strip()]
    signal = _word_pattern(phrases) if phrases else None
    return LanguageTable(default=default, patterns=patterns, aliases=aliases, signal=signal)


def supported_languages() -> tuple[str, ...]:
    return tuple(language_table().patterns)


def detect_language_requirements(description: str) -> frozenset[str]:
    """Language codes a posting asks for; never empty.

    Postings that mention no language, or only a generic proficiency phrase,
    fall back to the default language rather than to "no requirement".
    """
    table = language_table()
    text = (description or "").lower()
    found = {code for code, pattern in table.patterns.items() if pattern.search(text)}
    if found:
        return frozenset(found)
    if table.signal is not None and table.signal.search(text):
        logger.debug("language_signal_without_name default=%s", table.default)
    return frozenset({table.default})


def normalize_language_codes(values: Iterable[str] | None) -> frozenset[str]:
    """Map user-supplied codes or language names to codes, defaulting to the default language."""
    table = language_table()
    codes: set[str] = set()
    for value in values or []:
        key = str(value or "").strip().lower()
        if not key:
            continue
        code = table.aliases.get(key) or table.aliases.get(key.split("-")[0])
        if code:
            codes.add(code)
    return frozenset(codes) if codes else frozenset({table.default})


def language_match_factor(spoken: Iterable[str], required: Iterable[str]) -> float:
    spoken_set = set(spoken)
    required_set = set(required)
    overlap = spoken_set & required_set
    if not overlap:
        return NO_OVERLAP_FACTOR
    if overlap == required_set or len(overlap) >= len(required_set):
        return 1.0
    return max(PARTIAL_OVERLAP_FLOOR, len(overlap) / len(required_set))
