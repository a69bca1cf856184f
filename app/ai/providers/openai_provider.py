from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from openai import APIError, APIStatusError, AsyncOpenAI

from app.ai.types import ChatMessage
from app.core.errors import TransportError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        temperature: float = 0.2,
        max_output_tokens: int = 600,
    ):
        self._model = model
        self._temperature = float(os.getenv("OPENAI_TEMPERATURE", str(temperature)))
        self._max_output_tokens = max_output_tokens
        self._response_format = (os.getenv("OPENAI_RESPONSE_FORMAT") or "").strip().lower()
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        create_kwargs = {
            "model": self._model,
            "messages": payload,
            "temperature": self._temperature,
            "max_tokens": self._max_output_tokens,
        }
        if self._response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except APIStatusError as exc:
            raise TransportError(
                f"Oracle returned HTTP {exc.status_code}", status_code=exc.status_code
            ) from exc
        except APIError as exc:
            raise TransportError(f"Oracle request failed: {exc}") from exc

        if not response.choices:
            logger.debug("oracle_empty_choices model=%s", self._model)
            return ""
        return response.choices[0].message.content or ""
