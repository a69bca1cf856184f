from __future__ import annotations

import re

from app.core.config import settings


def cors_allowed_origins() -> list[str]:
    origins: list[str] = []
    for origin in settings.cors_allowed_origins:
        clean = origin.strip().rstrip("/")
        if clean and clean not in origins:
            origins.append(clean)
    return origins


def cors_allow_origin_regex() -> str | None:
    """Origin pattern for browser-extension callers, validated at startup."""
    regex = (settings.cors_allow_origin_regex or "").strip()
    if not regex:
        return None
    try:
        re.compile(regex)
    except re.error as exc:
        raise RuntimeError(f"CORS_ALLOW_ORIGIN_REGEX is not a valid pattern: {exc}") from exc
    return regex
