"""Prompt building, model calls and response normalization."""

from mandalart.generation.generator import MandalartGenerator
from mandalart.generation.normalizer import (
    extract_json,
    normalize_mandalart,
    parse_mandalart,
    parse_questions,
)
from mandalart.generation.prompt_builder import build_mandalart_prompt, build_questions_prompt

__all__ = [
    "MandalartGenerator",
    "extract_json",
    "normalize_mandalart",
    "parse_mandalart",
    "parse_questions",
    "build_mandalart_prompt",
    "build_questions_prompt",
]
