"""Data types for Mandalart documents, interviews and history."""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from mandalart.messages import DEFAULT_LOCALE, default_checklist_steps

GRID_SIZE = 8
PLACEHOLDER_TITLE = "..."


def new_item_id() -> str:
    """Generate a checklist item id."""
    return f"chk-{uuid.uuid4().hex[:12]}"


def default_checklist(locale: str = DEFAULT_LOCALE) -> list["TaskItem"]:
    """Fresh default checklist (Plan / Execute / Review) for a task."""
    return [TaskItem(id=new_item_id(), text=text) for text in default_checklist_steps(locale)]


@dataclass
class TaskItem:
    """One independently checkable step of a task."""

    id: str
    text: str
    checked: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "checked": self.checked}

    @classmethod
    def from_dict(cls, data: dict) -> "TaskItem":
        return cls(
            id=str(data.get("id") or new_item_id()),
            text=data.get("text", ""),
            checked=bool(data.get("checked", False)),
        )


@dataclass
class Task:
    """A task cell. Completion is derived from the checklist."""

    title: str
    description: str = ""
    advice: str = ""
    checklist: list[TaskItem] = field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return bool(self.checklist) and all(item.checked for item in self.checklist)

    def find_item(self, item_id: str) -> Optional[TaskItem]:
        for item in self.checklist:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "advice": self.advice,
            "isCompleted": self.is_completed,
            "checklist": [item.to_dict() for item in self.checklist],
        }

    @classmethod
    def from_dict(cls, data, locale: str = DEFAULT_LOCALE) -> "Task":
        """Create from a stored task; plain strings are the legacy shape."""
        if isinstance(data, str):
            return cls(title=data, checklist=default_checklist(locale))

        checklist = [TaskItem.from_dict(item) for item in data.get("checklist") or []]
        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            advice=data.get("advice", ""),
            checklist=checklist or default_checklist(locale),
        )

    @classmethod
    def placeholder(cls, locale: str = DEFAULT_LOCALE) -> "Task":
        return cls(title=PLACEHOLDER_TITLE, checklist=default_checklist(locale))


@dataclass
class SubGoal:
    """One of the eight areas around the main goal."""

    title: str
    description: str = ""
    advice: str = ""
    tasks: list[Task] = field(default_factory=list)

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.is_completed)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "advice": self.advice,
            "tasks": [task.to_dict() for task in self.tasks],
        }

    @classmethod
    def from_dict(cls, data: dict, locale: str = DEFAULT_LOCALE) -> "SubGoal":
        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            advice=data.get("advice", ""),
            tasks=[Task.from_dict(task, locale) for task in data.get("tasks") or []],
        )

    @classmethod
    def placeholder(cls, locale: str = DEFAULT_LOCALE) -> "SubGoal":
        return cls(
            title=PLACEHOLDER_TITLE,
            tasks=[Task.placeholder(locale) for _ in range(GRID_SIZE)],
        )


@dataclass
class MandalartData:
    """A full 9x9 plan: one main goal and eight sub-goals."""

    main_goal: str
    sub_goals: list[SubGoal] = field(default_factory=list)

    def task(self, sub_goal_index: int, task_index: int) -> Task:
        """Get a task by position, raising IndexError when out of range."""
        if not 0 <= sub_goal_index < len(self.sub_goals):
            raise IndexError(f"Sub-goal index out of range: {sub_goal_index}")
        tasks = self.sub_goals[sub_goal_index].tasks
        if not 0 <= task_index < len(tasks):
            raise IndexError(f"Task index out of range: {task_index}")
        return tasks[task_index]

    def to_dict(self) -> dict:
        return {
            "mainGoal": self.main_goal,
            "subGoals": [sub_goal.to_dict() for sub_goal in self.sub_goals],
        }

    @classmethod
    def from_dict(cls, data: dict, locale: str = DEFAULT_LOCALE) -> "MandalartData":
        return cls(
            main_goal=data.get("mainGoal", ""),
            sub_goals=[SubGoal.from_dict(sg, locale) for sg in data.get("subGoals") or []],
        )


@dataclass
class Question:
    """An interview question produced by the model."""

    id: str
    text: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text}


@dataclass
class InterviewAnswer:
    """The user's answer to one interview question."""

    question_id: str
    question_text: str
    answer: str = ""

    def to_dict(self) -> dict:
        return {
            "questionId": self.question_id,
            "questionText": self.question_text,
            "answer": self.answer,
        }


@dataclass
class HistoryItem:
    """A persisted Mandalart owned by one user."""

    id: str
    user_id: str
    timestamp: int
    data: MandalartData

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "timestamp": self.timestamp,
            "data": self.data.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryItem":
        return cls(
            id=str(data["id"]),
            user_id=str(data.get("userId", "")),
            timestamp=int(data.get("timestamp", 0)),
            data=MandalartData.from_dict(data.get("data") or {}),
        )


@dataclass
class User:
    """An application user."""

    id: str
    name: str
    email: str
    avatar: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "avatar": self.avatar}

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email", ""),
            avatar=data.get("avatar"),
        )
