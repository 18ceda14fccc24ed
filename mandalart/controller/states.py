"""Controller step definitions and transitions."""

from enum import Enum


class AppStep(Enum):
    """Steps of the goal-to-grid flow."""

    INPUT = "input"
    INTERVIEW = "interview"
    GENERATING = "generating"
    RESULT = "result"


# Valid step transitions
TRANSITIONS = {
    AppStep.INPUT: {AppStep.INTERVIEW, AppStep.RESULT},  # RESULT when opening a history item
    AppStep.INTERVIEW: {AppStep.GENERATING, AppStep.RESULT, AppStep.INPUT},
    AppStep.GENERATING: {AppStep.RESULT, AppStep.INTERVIEW, AppStep.INPUT},
    AppStep.RESULT: {AppStep.RESULT, AppStep.INPUT},
}


def can_transition(from_step: AppStep, to_step: AppStep) -> bool:
    """Check if a step transition is valid."""
    return to_step in TRANSITIONS.get(from_step, set())
