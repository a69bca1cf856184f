from app.ai.config import load_ai_config
from app.ai.types import AIClient
from app.core.matching_config import get_matching_value

from app.ai.providers.openai_provider import OpenAIProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=float(get_matching_value("oracle.temperature", 0.2)),
            max_output_tokens=int(get_matching_value("oracle.max_output_tokens", 600)),
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
