"""Prompt template loading."""

from pathlib import Path

PROMPTS_DIR = Path(__file__).parent


def load_prompt(name: str, locale: str = "en") -> str:
    """Load a prompt template by name, preferring the locale-specific file."""
    for candidate in (PROMPTS_DIR / f"{name}.{locale}.txt", PROMPTS_DIR / f"{name}.en.txt"):
        if candidate.exists():
            return candidate.read_text(encoding="utf-8")
    raise ValueError(f"Prompt not found: {name}")
