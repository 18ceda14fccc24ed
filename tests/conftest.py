"""Shared test helpers."""

import json
import tempfile
from pathlib import Path

import pytest

from mandalart.generation.providers.base import GenerationClient
from mandalart.models import MandalartData, SubGoal, Task, TaskItem


QUESTIONS_JSON = json.dumps({
    "questions": [
        {"id": "1", "text": "Why does this goal matter to you?"},
        {"id": "2", "text": "How much time can you give it each week?"},
        {"id": "3", "text": "What has stopped you before?"},
    ]
})


def make_mandalart(main_goal: str = "Run a marathon", sub_goals: int = 8, tasks: int = 8) -> MandalartData:
    """A document with numbered sub-goals and tasks, each with a three-step checklist."""
    return MandalartData(
        main_goal=main_goal,
        sub_goals=[
            SubGoal(
                title=f"Area {s + 1}",
                description=f"Why area {s + 1} matters",
                advice=f"Start area {s + 1} small",
                tasks=[
                    Task(
                        title=f"Task {s + 1}.{t + 1}",
                        description="Do the thing",
                        advice="Keep going",
                        checklist=[
                            TaskItem(id=f"i-{s}-{t}-{k}", text=f"Step {k + 1}")
                            for k in range(3)
                        ],
                    )
                    for t in range(tasks)
                ],
            )
            for s in range(sub_goals)
        ],
    )


def mandalart_json(sub_goals: int = 8, tasks: int = 8, main_goal: str = "Run a marathon") -> str:
    """Model-style JSON for a grid with object tasks."""
    return json.dumps({
        "mainGoal": main_goal,
        "subGoals": [
            {
                "title": f"Area {s + 1}",
                "description": "desc",
                "advice": "tip",
                "tasks": [
                    {
                        "title": f"Task {s + 1}.{t + 1}",
                        "description": "do it",
                        "advice": "keep going",
                        "checklist": ["Warm up", "Run", "Stretch"],
                    }
                    for t in range(tasks)
                ],
            }
            for s in range(sub_goals)
        ],
    })


class FakeClient(GenerationClient):
    """Returns queued responses in order; an Exception in the queue is raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []
        self._model = "fake-model"

    @property
    def name(self) -> str:
        return "fake"

    def generate(self, prompt, schema=None, schema_name="response"):
        self.prompts.append(prompt)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def db_path():
    from mandalart.db.migrations import run_migrations

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    run_migrations(path)
    yield path
    path.unlink(missing_ok=True)


@pytest.fixture
def user_id(db_path):
    from mandalart.db.users import UserRepository

    return UserRepository(db_path).create(email="ana@example.com", name="ana")["id"]
