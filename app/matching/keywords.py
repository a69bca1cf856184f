from __future__ import annotations

import math
import re
from collections import Counter

from app.core.errors import EmptyInputError
from app.core.matching_config import get_matching_value
from app.schemas.matching import KeywordWeight, ProcessedResume

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)
_ALPHA_RE = re.compile(r"^[a-z]+$")

STOP_WORDS = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "also", "am", "an",
        "and", "any", "are", "aren", "as", "at", "be", "because", "been", "before",
        "being", "below", "between", "both", "but", "by", "can", "cannot", "could",
        "couldn", "did", "didn", "do", "does", "doesn", "doing", "don", "down", "during",
        "each", "etc", "few", "for", "from", "further", "had", "hadn", "has", "hasn",
        "have", "haven", "having", "he", "her", "here", "hers", "herself", "him",
        "himself", "his", "how", "however", "i", "if", "in", "into", "is", "isn", "it",
        "its", "itself", "just", "let", "like", "me", "more", "most", "mustn", "my",
        "myself", "no", "nor", "not", "now", "of", "off", "on", "once", "only", "or",
        "other", "ought", "our", "ours", "ourselves", "out", "over", "own", "per",
        "same", "shan", "she", "should", "shouldn", "since", "so", "some", "such",
        "than", "that", "the", "their", "theirs", "them", "themselves", "then", "there",
        "these", "they", "this", "those", "through", "thus", "to", "too", "under",
        "until", "up", "upon", "us", "very", "via", "was", "wasn", "we", "were",
        "weren", "what", "when", "where", "whether", "which", "while", "who", "whom",
        "why", "will", "with", "within", "without", "won", "would", "wouldn", "yet",
        "you", "your", "yours", "yourself", "yourselves",
    }
)


def tokenize_resume(text: str, *, min_length: int | None = None) -> list[str]:
    """Lower-case word tokens with stop-words and non-alphabetic or short tokens removed."""
    min_len = int(min_length or get_matching_value("keywords.min_token_length", 3))
    tokens = _TOKEN_RE.findall((text or "").lower())
    return [
        token
        for token in tokens
        if token not in STOP_WORDS and _ALPHA_RE.match(token) and len(token) >= min_len
    ]


def _inverse_document_frequency(document_count: int, documents_with_term: int) -> float:
    return 1.0 + math.log(document_count / (1.0 + documents_with_term))


def rank_terms(tokens: list[str], *, limit: int | None = None) -> list[KeywordWeight]:
    """Weight terms by tf-idf with the token stream treated as the only document.

    With a single document every term shares the same idf, so the ordering is
    by raw frequency and ties keep first-occurrence order.
    """
    if not tokens:
        raise EmptyInputError()

    max_keywords = int(limit or get_matching_value("keywords.max_keywords", 50))
    idf = _inverse_document_frequency(1, 1)
    counts = Counter(tokens)
    weighted = [KeywordWeight(term=term, weight=count * idf) for term, count in counts.items()]
    weighted.sort(key=lambda item: item.weight, reverse=True)
    return weighted[:max_keywords]


def extract_keywords(text: str, *, limit: int | None = None) -> list[KeywordWeight]:
    return rank_terms(tokenize_resume(text), limit=limit)


def process_resume_text(text: str) -> ProcessedResume:
    tokens = tokenize_resume(text)
    keywords = rank_terms(tokens)
    return ProcessedResume(text=text, tokens=tokens, keywords=keywords)
