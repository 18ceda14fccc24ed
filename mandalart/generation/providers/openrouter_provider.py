"""OpenRouter provider (OpenAI-compatible API)."""

import logging
import os
from typing import Optional

from openai import OpenAI, OpenAIError

from mandalart.config import DEFAULT_OPENROUTER_BASE_URL
from mandalart.errors import GenerationError
from mandalart.generation.providers.base import GenerationClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You help people plan their goals. Return only valid JSON."


class OpenRouterProvider(GenerationClient):
    """Calls an OpenRouter model through the OpenAI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: str = DEFAULT_OPENROUTER_BASE_URL,
        timeout: float = 120.0,
    ):
        self.api_key = api_key or os.environ.get("OPENROUTER_API_KEY")
        self._model = model or os.environ.get("OPENROUTER_MODEL_NAME", "")
        self._client = OpenAI(api_key=self.api_key, base_url=base_url, timeout=timeout, max_retries=0)

    @property
    def name(self) -> str:
        return "openrouter"

    def _normalize_text(self, text: str) -> str:
        """Replace smart quotes that some models emit around JSON keys."""
        replacements = {
            '\u201c': '"',  # Left double quote
            '\u201d': '"',  # Right double quote
        }
        for old, new in replacements.items():
            text = text.replace(old, new)
        return text

    def generate(self, prompt: str, schema: Optional[dict] = None, schema_name: str = "response") -> str:
        """Generate raw text using the configured OpenRouter model."""
        kwargs = {}
        if schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": schema},
            }

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                **kwargs,
            )
        except OpenAIError as e:
            raise GenerationError(f"OpenRouter request failed: {e}", provider=self.name)

        if not response.choices:
            raise GenerationError("No response from AI", provider=self.name)
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise GenerationError("No response from AI", provider=self.name)
        return self._normalize_text(content.strip())
