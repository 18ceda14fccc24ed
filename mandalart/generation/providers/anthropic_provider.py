"""Anthropic Claude provider."""

import json
import os
from typing import Optional

from anthropic import Anthropic, AnthropicError

from mandalart.errors import GenerationError
from mandalart.generation.providers.base import GenerationClient


class AnthropicProvider(GenerationClient):
    """Calls Claude; the response schema is embedded in the system prompt."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-haiku-4-5-20251001",
        timeout: float = 120.0,
        max_tokens: int = 8192,
    ):
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._model = model
        self.max_tokens = max_tokens
        self._client = Anthropic(api_key=self.api_key, timeout=timeout, max_retries=0)

    @property
    def name(self) -> str:
        return "anthropic"

    def generate(self, prompt: str, schema: Optional[dict] = None, schema_name: str = "response") -> str:
        """Generate raw text using Anthropic Claude."""
        system = "You help people plan their goals. Return only valid JSON."
        if schema is not None:
            system += f"\nThe JSON must match this schema ({schema_name}):\n{json.dumps(schema)}"

        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "user", "content": prompt},
                ],
                system=system,
                temperature=0.7,
            )
        except AnthropicError as e:
            raise GenerationError(f"Anthropic request failed: {e}", provider=self.name)

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise GenerationError("No response from AI", provider=self.name)
        return text.strip()
