"""Generator - prompt, call the model, normalize the answer."""

import logging
import time
from typing import Optional, Sequence

from mandalart.errors import GenerationError, ParseError, ValidationError
from mandalart.generation.normalizer import parse_mandalart, parse_questions
from mandalart.generation.prompt_builder import build_mandalart_prompt, build_questions_prompt
from mandalart.generation.providers.base import GenerationClient
from mandalart.generation.schemas import MandalartResponse, QuestionsResponse, json_schema
from mandalart.logging import MandalartLogger
from mandalart.messages import DEFAULT_LOCALE
from mandalart.models import InterviewAnswer, MandalartData, Question

logger = logging.getLogger(__name__)


class MandalartGenerator:
    """
    Drives the two generation calls.

    Flow for each call:
    1. Build the prompt
    2. Call the client with the matching response schema
    3. Extract, validate and normalize the JSON

    Any failure is terminal for the attempt; nothing is retried.
    """

    def __init__(
        self,
        client: GenerationClient,
        locale: str = DEFAULT_LOCALE,
        events: Optional[MandalartLogger] = None,
    ):
        self.client = client
        self.locale = locale
        self.events = events or MandalartLogger()

    def _call(self, kind: str, prompt: str, schema: dict) -> str:
        self.events.generation_started(kind, self.client.name, self.client.model)
        try:
            return self.client.generate(prompt, schema, schema_name=kind)
        except GenerationError as e:
            self.events.generation_failed(kind, type(e).__name__, str(e))
            raise
        except Exception as e:
            # SDK bugs and transport errors not wrapped by the provider
            self.events.generation_failed(kind, type(e).__name__, str(e))
            raise GenerationError(f"{self.client.name} failed: {e}", provider=self.client.name) from e

    def generate_questions(self, goal: str) -> list[Question]:
        """Ask the model for three interview questions about the goal."""
        started = time.monotonic()
        text = self._call("questions", build_questions_prompt(goal, self.locale), json_schema(QuestionsResponse))
        try:
            questions = parse_questions(text)
        except (ParseError, ValidationError) as e:
            self.events.generation_failed("questions", type(e).__name__, str(e), raw_text=text)
            raise
        self.events.generation_complete("questions", time.monotonic() - started)
        logger.debug(f"Received {len(questions)} questions")
        return questions

    def generate_mandalart(
        self,
        goal: str,
        answers: Optional[Sequence[InterviewAnswer]] = None,
    ) -> MandalartData:
        """Ask the model for the full grid and normalize it to 8x8."""
        started = time.monotonic()
        prompt = build_mandalart_prompt(goal, answers, self.locale)
        text = self._call("mandalart", prompt, json_schema(MandalartResponse))
        try:
            data = parse_mandalart(text, self.locale)
        except (ParseError, ValidationError) as e:
            self.events.generation_failed("mandalart", type(e).__name__, str(e), raw_text=text)
            raise
        self.events.generation_complete("mandalart", time.monotonic() - started)
        return data
