from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_MATCHING_CONFIG_CACHE: dict[str, Any] | None = None
_MATCHING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "matching.yaml"

# sections read by every pipeline stage
_REQUIRED_SECTIONS = ("batching", "pagination", "oracle", "languages")


def get_matching_config() -> dict[str, Any]:
    """Pipeline tuning (batch size and delay, page sizes, oracle prompt limits,
    keyword limits, upload timeout) plus the language table. Read once per process."""
    global _MATCHING_CONFIG_CACHE

    if _MATCHING_CONFIG_CACHE is not None:
        return _MATCHING_CONFIG_CACHE

    try:
        raw = _MATCHING_CONFIG_PATH.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeError(
            f"Job matching config missing at '{_MATCHING_CONFIG_PATH}'; "
            "the ranker cannot start without batching and language settings."
        ) from exc
    except OSError as exc:
        raise RuntimeError(f"Cannot read job matching config '{_MATCHING_CONFIG_PATH}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Job matching config '{_MATCHING_CONFIG_PATH}' is not valid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Job matching config '{_MATCHING_CONFIG_PATH}' must map section names to settings."
        )
    missing = [section for section in _REQUIRED_SECTIONS if section not in parsed]
    if missing:
        raise RuntimeError(
            f"Job matching config '{_MATCHING_CONFIG_PATH}' lacks sections: {', '.join(missing)}"
        )

    _MATCHING_CONFIG_CACHE = parsed
    return _MATCHING_CONFIG_CACHE


def get_matching_value(path: str, default: Any = None) -> Any:
    """Look up a tuning value by dotted path, e.g. ``pagination.page_size``."""
    if not path:
        return default

    current: Any = get_matching_config()
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current
