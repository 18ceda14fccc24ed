"""MCP tool functions for interviews, generation and history."""

import logging
from typing import Optional

from mandalart.app import App, build_app
from mandalart.controller.controller import MandalartController
from mandalart.errors import MandalartError
from mandalart.models import Question, User

logger = logging.getLogger(__name__)


def _user(app: App, email: Optional[str]) -> Optional[User]:
    """The named user, or the logged-in user when no email is given."""
    if email:
        return app.auth.find_user(email)
    return app.auth.current_user()


def _not_found(email: Optional[str]) -> dict:
    who = email or "the current session"
    return {"success": False, "error": f"No user for {who}. Log in with the CLI first."}


def ask_questions(goal: str, app: Optional[App] = None) -> dict:
    """
    Get the three interview questions for a goal.

    Args:
        goal: The main goal in the user's own words
    """
    app = app or build_app()
    controller = app.controller()
    if not controller.submit_goal(goal):
        return {"success": False, "error": controller.error or "Goal is empty"}
    return {
        "success": True,
        "goal": controller.goal,
        "questions": [q.to_dict() for q in controller.questions],
    }


def _asked_questions(answers: list, questions: Optional[list]) -> Optional[list[Question]]:
    """The questions being answered, from ``questions`` or from answer objects."""
    if questions:
        asked = []
        for index, question in enumerate(questions):
            if isinstance(question, dict):
                asked.append(Question(id=str(question.get("id") or index + 1), text=str(question.get("text", ""))))
            else:
                asked.append(Question(id=str(index + 1), text=str(question)))
        return asked

    if answers and all(isinstance(a, dict) and a.get("questionText") for a in answers):
        return [
            Question(id=str(a.get("questionId") or index + 1), text=str(a["questionText"]))
            for index, a in enumerate(answers)
        ]
    return None


def create_mandalart(
    goal: str,
    answers: Optional[list] = None,
    questions: Optional[list] = None,
    email: Optional[str] = None,
    app: Optional[App] = None,
) -> dict:
    """
    Generate a full grid from an interview and save it to the user's history.

    The questions are the ones ``ask_questions`` returned; they are not asked
    again.

    Args:
        goal: The main goal
        answers: Answers in question order, as plain strings or
            ``{"questionId": ..., "questionText": ..., "answer": ...}`` objects
        questions: The asked questions (``{"id", "text"}`` objects or texts);
            optional when every answer carries its ``questionText``
        email: Owner of the saved grid; defaults to the logged-in user
    """
    app = app or build_app()
    user = _user(app, email)
    if email and user is None:
        return _not_found(email)

    answers = list(answers or [])
    asked = _asked_questions(answers, questions)
    if asked is None:
        return {
            "success": False,
            "error": "Pass the questions from ask_questions, or answers that include questionText",
        }

    controller = app.controller()
    controller.set_user(user)
    if not controller.start_interview(goal, asked):
        return {"success": False, "error": "Goal is empty"}

    for index in range(len(controller.answers)):
        answer = answers[index] if index < len(answers) else ""
        if isinstance(answer, dict):
            answer = answer.get("answer", "")
        controller.set_answer(index, str(answer or ""))

    if not controller.generate():
        return {
            "success": False,
            "error": controller.error,
            "questions": [q.to_dict() for q in controller.questions],
        }

    return {
        "success": True,
        "id": controller.active_history_id,
        "saved": controller.active_history_id is not None,
        "warning": controller.error,
        "data": controller.document.to_dict(),
    }


def list_mandalarts(email: Optional[str] = None, app: Optional[App] = None) -> dict:
    """List a user's saved grids, newest first."""
    app = app or build_app()
    user = _user(app, email)
    if user is None:
        return _not_found(email)

    items = app.history.list(user.id)
    return {
        "count": len(items),
        "mandalarts": [
            {
                "id": item.id,
                "timestamp": item.timestamp,
                "mainGoal": item.data.main_goal,
                "completedTasks": sum(sg.completed_count for sg in item.data.sub_goals),
            }
            for item in items
        ],
    }


def get_mandalart(history_id: str, email: Optional[str] = None, app: Optional[App] = None) -> dict:
    """Get one of the user's saved grids with every task and checklist."""
    app = app or build_app()
    user = _user(app, email)
    if user is None:
        return _not_found(email)

    item = app.history.get(history_id)
    if item is None or item.user_id != user.id:
        return {"success": False, "error": f"Mandalart not found: {history_id}"}
    return {"success": True, **item.to_dict()}


def toggle_checklist_item(
    history_id: str,
    sub_goal: int,
    task: int,
    item_id: str,
    email: Optional[str] = None,
    app: Optional[App] = None,
) -> dict:
    """
    Check or uncheck one checklist item of a saved grid.

    Args:
        history_id: The saved grid
        sub_goal: Sub-goal index, 0-7
        task: Task index within the sub-goal, 0-7
        item_id: The checklist item id
        email: Owner of the grid; defaults to the logged-in user
    """
    app = app or build_app()
    user = _user(app, email)
    if user is None:
        return _not_found(email)

    controller = MandalartController(None, history=app.history, user=user,
                                     locale=app.config.locale, events=app.events)
    try:
        controller.open_history_item(history_id)
        updated = controller.toggle_item(sub_goal, task, item_id)
    except (KeyError, IndexError, MandalartError) as e:
        return {"success": False, "error": str(e)}

    if controller.error:
        return {"success": False, "error": controller.error}
    return {"success": True, "task": updated.to_dict()}


def delete_mandalart(history_id: str, email: Optional[str] = None, app: Optional[App] = None) -> dict:
    """Delete a saved grid. Deleting an unknown id succeeds."""
    app = app or build_app()
    user = _user(app, email)
    if user is None:
        return _not_found(email)
    app.history.delete(history_id, user_id=user.id)
    return {"success": True, "id": history_id}
