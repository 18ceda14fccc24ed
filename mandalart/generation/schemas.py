"""Response schemas for model output.

Two mandalart shapes are accepted:
- tasks as plain strings (older prompt)
- tasks as objects with title/description/advice/checklist
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class QuestionSchema(_Schema):
    """One interview question."""

    id: str = Field(..., description="Question identifier")
    text: str = Field(..., min_length=1, description="Question text")


class QuestionsResponse(_Schema):
    """Model output for the interview step."""

    model_config = ConfigDict(json_schema_extra={
        "example": {"questions": [{"id": "1", "text": "Why does this goal matter to you?"}]}
    })

    questions: list[QuestionSchema] = Field(..., min_length=1)


class TaskSchema(_Schema):
    """A task returned as an object."""

    title: str = Field(..., description="Short task title")
    description: str = Field(default="", description="What the task involves")
    advice: str = Field(default="", description="Actionable tip")
    checklist: list[str] = Field(default_factory=list, description="Short sub-steps")

    @field_validator("checklist", mode="before")
    @classmethod
    def drop_blank_steps(cls, v):
        """Tolerate null and blank checklist entries."""
        if v is None:
            return []
        if isinstance(v, list):
            return [step for step in v if isinstance(step, str) and step.strip()]
        return v


class SubGoalSchema(_Schema):
    """A sub-goal with its tasks."""

    title: str = Field(..., description="Short sub-goal title")
    description: str = Field(default="", description="Why this sub-goal matters")
    advice: str = Field(default="", description="How to start or improve")
    tasks: list[Union[TaskSchema, str]] = Field(..., description="Exactly 8 tasks")


class MandalartResponse(_Schema):
    """Model output for the full grid."""

    main_goal: str = Field(..., alias="mainGoal", description="The central goal")
    sub_goals: list[SubGoalSchema] = Field(..., alias="subGoals", description="Exactly 8 sub-goals")


def json_schema(model: type[BaseModel]) -> dict:
    """JSON schema (wire names) sent to the generation endpoint."""
    return model.model_json_schema(by_alias=True)
