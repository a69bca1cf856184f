from .keywords import extract_keywords, process_resume_text, tokenize_resume
from .language import detect_language_requirements, language_match_factor, normalize_language_codes
from .orchestrator import JobRanker
from .response_parser import Failed, Parsed, recover_payload
from .scoring_client import ScoringClient
from .session import MatchingSession, PageView

__all__ = [
    "extract_keywords",
    "process_resume_text",
    "tokenize_resume",
    "detect_language_requirements",
    "language_match_factor",
    "normalize_language_codes",
    "JobRanker",
    "Failed",
    "Parsed",
    "recover_payload",
    "ScoringClient",
    "MatchingSession",
    "PageView",
]
