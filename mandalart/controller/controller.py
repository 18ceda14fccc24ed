"""Interview/Grid Controller - owns one session's flow state."""

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Optional

from mandalart.controller.states import AppStep, can_transition
from mandalart.errors import (
    AuthError,
    BusyError,
    GenerationError,
    InvalidTransitionError,
    ParseError,
    PersistenceError,
    ValidationError,
)
from mandalart.generation.generator import MandalartGenerator
from mandalart.logging import MandalartLogger
from mandalart.messages import DEFAULT_LOCALE, get_message
from mandalart.models import HistoryItem, InterviewAnswer, MandalartData, Question, Task, User
from mandalart.storage.history import HistoryStore

logger = logging.getLogger(__name__)

# Failures that end a generation attempt and are reported to the user
GENERATION_FAILURES = (GenerationError, ParseError, ValidationError)


class MandalartController:
    """
    Drives ``input -> interview -> generating -> result``.

    State is held in memory for a single session. Persistence is optional:
    without a history store or a user, generated grids are only kept in
    memory.
    """

    def __init__(
        self,
        generator: MandalartGenerator,
        history: Optional[HistoryStore] = None,
        user: Optional[User] = None,
        locale: str = DEFAULT_LOCALE,
        events: Optional[MandalartLogger] = None,
    ):
        self.generator = generator
        self.history_store = history
        self.user = user
        self.locale = locale
        self.events = events or MandalartLogger()
        self.session_id = uuid.uuid4().hex[:8]

        self.step = AppStep.INPUT
        self.goal = ""
        self.questions: list[Question] = []
        self.answers: list[InterviewAnswer] = []
        self.document: Optional[MandalartData] = None
        self.active_history_id: Optional[str] = None
        self.error: Optional[str] = None

        self._busy = threading.Lock()

    @property
    def loading(self) -> bool:
        return self._busy.locked()

    @contextmanager
    def _busy_gate(self):
        """Allow one generation at a time; re-entrant calls are rejected."""
        if not self._busy.acquire(blocking=False):
            raise BusyError(get_message("busy", self.locale))
        try:
            yield
        finally:
            self._busy.release()

    def _transition(self, to_step: AppStep):
        if not can_transition(self.step, to_step):
            raise InvalidTransitionError(
                f"Invalid transition: {self.step.value} -> {to_step.value}",
                from_step=self.step.value,
                to_step=to_step.value,
            )
        from_step = self.step
        self.step = to_step
        self.events.step_transition(self.session_id, from_step.value, to_step.value)

    def _require_step(self, step: AppStep, action: str):
        if self.step != step:
            raise InvalidTransitionError(
                f"Cannot {action} while in {self.step.value}",
                from_step=self.step.value,
            )

    def set_user(self, user: Optional[User]) -> None:
        """Switch the session's user (login/logout). The active document is unlinked."""
        if user is None or self.user is None or user.id != self.user.id:
            self.active_history_id = None
        self.user = user

    # ------------------------------------------------------------------
    # input -> interview
    # ------------------------------------------------------------------

    def submit_goal(self, goal: str) -> bool:
        """Fetch interview questions for the goal.

        Returns True when the controller moved to the interview step. A blank
        goal is a no-op and returns False without calling the model.
        """
        if not goal or not goal.strip():
            return False
        self._require_step(AppStep.INPUT, "submit a goal")

        with self._busy_gate():
            self.error = None
            try:
                questions = self.generator.generate_questions(goal)
            except GENERATION_FAILURES as e:
                logger.warning(f"Question generation failed: {e}")
                self.error = get_message("questions_failed", self.locale)
                return False

            self._enter_interview(goal, questions)
            return True

    def start_interview(self, goal: str, questions: list[Question]) -> bool:
        """Enter the interview with questions that were asked earlier.

        No model call is made. A blank goal is a no-op and returns False.
        """
        if not goal or not goal.strip():
            return False
        self._require_step(AppStep.INPUT, "start an interview")
        if not questions:
            raise ValueError("At least one question is required")

        with self._busy_gate():
            self.error = None
            self._enter_interview(goal, questions)
            return True

    def _enter_interview(self, goal: str, questions: list[Question]):
        self.goal = goal.strip()
        self.questions = list(questions)
        self.answers = [
            InterviewAnswer(question_id=q.id, question_text=q.text, answer="")
            for q in self.questions
        ]
        self._transition(AppStep.INTERVIEW)

    def set_answer(self, index: int, answer: str) -> None:
        """Record the answer to the index-th question."""
        self._require_step(AppStep.INTERVIEW, "answer questions")
        if not 0 <= index < len(self.answers):
            raise IndexError(f"Question index out of range: {index}")
        self.answers[index].answer = answer

    # ------------------------------------------------------------------
    # interview -> generating -> result
    # ------------------------------------------------------------------

    def generate(self) -> bool:
        """Generate the grid from the goal and answers.

        Returns True when the controller reached the result step. Missing
        answers leave the step unchanged; a failed generation returns to the
        interview with the answers preserved.
        """
        with self._busy_gate():
            self._require_step(AppStep.INTERVIEW, "generate")

            if any(not a.answer.strip() for a in self.answers):
                self.error = get_message("answers_required", self.locale)
                return False

            self.error = None
            self._transition(AppStep.GENERATING)
            try:
                data = self.generator.generate_mandalart(self.goal, self.answers)
            except GENERATION_FAILURES as e:
                logger.warning(f"Mandalart generation failed: {e}")
                self.error = get_message("generation_failed", self.locale)
                self._transition(AppStep.INTERVIEW)
                return False

            self.document = data
            self.active_history_id = None
            self._save_new(data)
            self._transition(AppStep.RESULT)
            return True

    def _save_new(self, data: MandalartData) -> None:
        if self.user is None or self.history_store is None:
            return
        try:
            item = self.history_store.create(self.user.id, data)
        except PersistenceError as e:
            self.events.persistence_failed("create", None, str(e))
            self.error = get_message("save_failed", self.locale)
            return
        self.active_history_id = item.id

    # ------------------------------------------------------------------
    # result
    # ------------------------------------------------------------------

    def toggle_item(self, sub_goal_index: int, task_index: int, item_id: str) -> Task:
        """Flip one checklist item and autosave the active history item.

        When the store rejects the update the flip is undone and ``error`` is
        set, so the displayed state always matches what was saved.
        """
        self._require_step(AppStep.RESULT, "toggle a checklist item")
        if self.document is None:
            raise InvalidTransitionError("No document loaded", from_step=self.step.value)

        task = self.document.task(sub_goal_index, task_index)
        item = task.find_item(item_id)
        if item is None:
            raise KeyError(f"Checklist item not found: {item_id}")

        item.checked = not item.checked
        self.error = None

        if self.active_history_id and self.history_store is not None:
            try:
                self.history_store.update(
                    self.active_history_id,
                    self.document,
                    user_id=self.user.id if self.user else None,
                )
            except PersistenceError as e:
                item.checked = not item.checked
                self.events.persistence_failed("update", self.active_history_id, str(e))
                self.error = get_message("update_failed", self.locale)
                return task

        self.events.checklist_toggled(self.active_history_id, item_id, item.checked, task.is_completed)
        return task

    def reset(self) -> None:
        """Go back to the input step, clearing all session data."""
        if self.loading:
            raise BusyError(get_message("busy", self.locale))
        if self.step != AppStep.INPUT:
            self._transition(AppStep.INPUT)
        self.goal = ""
        self.questions = []
        self.answers = []
        self.document = None
        self.active_history_id = None
        self.error = None

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------

    def history(self) -> list[HistoryItem]:
        """The current user's saved grids, newest first. Empty when logged out."""
        if self.user is None or self.history_store is None:
            return []
        return self.history_store.list(self.user.id)

    def _require_user(self) -> User:
        if self.user is None:
            raise AuthError(get_message("not_authenticated", self.locale))
        return self.user

    def open_history_item(self, item_id: str) -> HistoryItem:
        """Show a saved grid; checklist changes are written back to it."""
        user = self._require_user()
        if self.loading:
            raise BusyError(get_message("busy", self.locale))
        item = self.history_store.get(item_id) if self.history_store else None
        if item is None or item.user_id != user.id:
            raise KeyError(f"History item not found: {item_id}")

        self._transition(AppStep.RESULT)
        self.document = item.data
        self.goal = item.data.main_goal
        self.questions = []
        self.answers = []
        self.active_history_id = item.id
        self.error = None
        return item

    def delete_history_item(self, item_id: str) -> None:
        user = self._require_user()
        if self.history_store is not None:
            self.history_store.delete(item_id, user_id=user.id)
        if item_id == self.active_history_id:
            self.active_history_id = None

    def clear_history(self) -> int:
        user = self._require_user()
        if self.history_store is None:
            return 0
        self.active_history_id = None
        return self.history_store.clear(user.id)
