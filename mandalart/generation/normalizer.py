"""Turns raw model text into validated, fixed-shape documents.

Steps:
1. extract the first-``{``-to-last-``}`` substring and parse it (ParseError)
2. validate against the response schema (ValidationError)
3. pad/truncate sub-goals and tasks to exactly 8, always
"""

import copy
import json
import logging

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from mandalart.errors import ParseError, ValidationError
from mandalart.generation.schemas import MandalartResponse, QuestionsResponse, TaskSchema
from mandalart.messages import DEFAULT_LOCALE
from mandalart.models import (
    GRID_SIZE,
    MandalartData,
    Question,
    SubGoal,
    Task,
    TaskItem,
    default_checklist,
    new_item_id,
)

logger = logging.getLogger(__name__)


def extract_json(text: str) -> str:
    """Return the greedy first ``{`` to last ``}`` substring of text."""
    if not text:
        raise ParseError("No JSON found in response", raw_text=text)
    start = text.find("{")
    end = text.rfind("}") + 1
    if start == -1 or end <= start:
        raise ParseError("No JSON found in response", raw_text=text)
    return text[start:end]


def parse_json(text: str) -> dict:
    """Extract and decode the JSON object embedded in text."""
    candidate = extract_json(text)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse response as JSON: {e}", raw_text=text)
    if not isinstance(data, dict):
        raise ParseError("Response JSON is not an object", raw_text=text)
    return data


def _validate(model: type[BaseModel], data: dict, raw_text: str):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ValidationError(
            f"Response does not match {model.__name__}: {'; '.join(errors[:5])}",
            raw_text=raw_text,
            errors=errors,
        )


def parse_questions(text: str) -> list[Question]:
    """Parse interview questions from raw model text."""
    validated = _validate(QuestionsResponse, parse_json(text), text)
    return [Question(id=q.id, text=q.text.strip()) for q in validated.questions]


def _task_from_schema(task, locale: str) -> Task:
    if isinstance(task, str):
        return Task(title=task.strip(), checklist=default_checklist(locale))
    if isinstance(task, TaskSchema):
        checklist = [TaskItem(id=new_item_id(), text=step.strip()) for step in task.checklist]
        return Task(
            title=task.title.strip(),
            description=task.description.strip(),
            advice=task.advice.strip(),
            checklist=checklist or default_checklist(locale),
        )
    raise TypeError(f"Unexpected task type: {type(task).__name__}")


def normalize_mandalart(data: MandalartData, locale: str = DEFAULT_LOCALE) -> MandalartData:
    """Pad with placeholders and truncate so there are exactly 8x8 tasks.

    Runs unconditionally; a well-formed grid comes back equal to the input.
    The input is not modified.
    """
    data = copy.deepcopy(data)

    while len(data.sub_goals) < GRID_SIZE:
        data.sub_goals.append(SubGoal.placeholder(locale))
    del data.sub_goals[GRID_SIZE:]

    for sub_goal in data.sub_goals:
        while len(sub_goal.tasks) < GRID_SIZE:
            sub_goal.tasks.append(Task.placeholder(locale))
        del sub_goal.tasks[GRID_SIZE:]
        for task in sub_goal.tasks:
            if not task.checklist:
                task.checklist = default_checklist(locale)

    return data


def parse_mandalart(text: str, locale: str = DEFAULT_LOCALE) -> MandalartData:
    """Parse, validate and normalize a grid from raw model text."""
    validated = _validate(MandalartResponse, parse_json(text), text)

    if len(validated.sub_goals) != GRID_SIZE:
        logger.warning(f"Model returned {len(validated.sub_goals)} sub-goals, normalizing to {GRID_SIZE}")

    data = MandalartData(
        main_goal=validated.main_goal.strip(),
        sub_goals=[
            SubGoal(
                title=sg.title.strip(),
                description=sg.description.strip(),
                advice=sg.advice.strip(),
                tasks=[_task_from_schema(task, locale) for task in sg.tasks],
            )
            for sg in validated.sub_goals
        ],
    )
    return normalize_mandalart(data, locale)
