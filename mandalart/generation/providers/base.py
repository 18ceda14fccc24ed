"""Abstract base class for generation clients."""

from abc import ABC, abstractmethod
from typing import Optional


class GenerationClient(ABC):
    """Abstract base class for text-generation providers."""

    @abstractmethod
    def generate(self, prompt: str, schema: Optional[dict] = None, schema_name: str = "response") -> str:
        """
        Send a prompt to the model and return its raw text.

        Args:
            prompt: Fully built prompt
            schema: JSON schema the response is expected to match
            schema_name: Name reported to the endpoint alongside the schema

        Returns:
            Raw response text (not parsed)

        Raises:
            GenerationError: endpoint error, timeout or empty response
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for logging (e.g., 'openrouter', 'anthropic')."""
        pass

    @property
    def model(self) -> str:
        return getattr(self, "_model", "")
