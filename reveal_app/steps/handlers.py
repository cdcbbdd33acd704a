"""Step-specific input handlers: quiz answers, terms, copy and date selection."""

import structlog

from ..collaborators import Collaborators
from ..config.defaults import AppConfig
from ..state.models import Step
from ..state.store import PersistedStore
from .views import Surface

logger = structlog.get_logger(__name__)


class StepHandlers:
    """Mutations triggered from inside a step view."""

    def __init__(
        self,
        store: PersistedStore,
        surface: Surface,
        config: AppConfig,
        collaborators: Collaborators
    ) -> None:
        self.store = store
        self.surface = surface
        self.config = config
        self.content = config.content
        self.collaborators = collaborators
        self.logger = logger

    def answer_quiz(self, answer: int) -> bool:
        """Record an answer and move to the next question or to the results."""
        state = self.store.get()
        questions = self.content.quiz_questions

        if state.not_now_path or state.step != Step.QUIZ or state.quiz_complete:
            return False

        index = min(state.quiz_current_question, len(questions) - 1)
        if not 0 <= answer < len(questions[index].options):
            self.logger.warning("Ignoring out-of-range quiz answer", answer=answer, question=index)
            return False

        answers = state.quiz_answers + (answer,)
        if index + 1 >= len(questions):
            self.store.set(quiz_answers=answers, quiz_complete=True)
        else:
            self.store.set(quiz_answers=answers, quiz_current_question=index + 1)
        return True

    def mark_terms_scrolled(self) -> None:
        """The terms were scrolled to the bottom; unlock acceptance once."""
        if not self.store.get().terms_scrolled:
            self.store.set(terms_scrolled=True)

    def accept_terms(self) -> bool:
        """Accept only after the terms were read to the end."""
        state = self.store.get()
        if state.step != Step.TERMS or not state.terms_scrolled:
            return False
        self.store.next_step()
        return True

    def decline_terms(self) -> None:
        """First declines bounce back to the top; the limit opens the not-now path."""
        attempts = self.store.get().terms_decline_attempts + 1
        self.store.set(terms_decline_attempts=attempts)

        if attempts >= self.config.flow.terms_decline_limit:
            self.logger.info("Terms declined, leaving the flow", attempts=attempts)
            self.store.enter_not_now_path()
            return

        view = self.surface.view
        if view is not None and view.name == "terms":
            view.flags["shake"] = True
            view.flags["scroll_top"] = True
        self.collaborators.toasts.show(self.content.terms_decline_message)

    def copy_response(self) -> bool:
        """Copy the reply message; the toast says whether it worked."""
        message = self.content.copy_message()
        copied = self.collaborators.clipboard.copy_to_clipboard(message)

        if copied:
            self.collaborators.toasts.show(self.content.copy_success_message)
        else:
            self.collaborators.toasts.show(self.content.copy_failure_prefix + message)
        return copied

    def select_alternative_date(self, date_index: int) -> bool:
        if not 0 <= date_index < len(self.content.alternative_dates):
            self.logger.warning("Ignoring out-of-range alternative date", date_index=date_index)
            return False
        self.logger.info("Alternative date selected", date_index=date_index)
        self.collaborators.toasts.show(self.content.alternative_date_message)
        self.collaborators.particles.burst()
        return True
