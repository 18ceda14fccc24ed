"""Builds the question and grid prompts from the user's goal and answers."""

from typing import Optional, Sequence

from mandalart.generation.prompts import load_prompt
from mandalart.messages import DEFAULT_LOCALE, get_message, resolve_locale
from mandalart.models import InterviewAnswer


def format_context(answers: Optional[Sequence[InterviewAnswer]], locale: str = DEFAULT_LOCALE) -> str:
    """Render interview answers as ``Q: ...`` / ``A: ...`` lines."""
    if not answers:
        return "-"
    q_label = get_message("context_question", locale)
    a_label = get_message("context_answer", locale)
    return "\n".join(
        f"{q_label}: {answer.question_text}\n{a_label}: {answer.answer.strip()}"
        for answer in answers
    )


def build_questions_prompt(goal: str, locale: str = DEFAULT_LOCALE) -> str:
    """Prompt asking for exactly three strategic questions about the goal."""
    locale = resolve_locale(locale)
    return load_prompt("questions", locale).format(goal=goal.strip())


def build_mandalart_prompt(
    goal: str,
    answers: Optional[Sequence[InterviewAnswer]] = None,
    locale: str = DEFAULT_LOCALE,
) -> str:
    """Prompt asking for the 8x8 grid, using the interview answers as context."""
    locale = resolve_locale(locale)
    return load_prompt("mandalart", locale).format(
        goal=goal.strip(),
        context=format_context(answers, locale),
    )
