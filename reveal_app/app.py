"""
Reveal application coordinator.

Wires the store, animation sequencer, evasive control and step dispatcher
together and routes user actions to them:

    Action → debounce → handler → store.set → dispatcher.render → Surface
"""

import random
from typing import Any, Callable, Optional

import structlog

from .animation.epoch import AnimationEpoch
from .animation.sequencer import AnimationSequencer, SleepFunc
from .collaborators import Collaborators
from .config.defaults import AppConfig, get_default_config
from .controls.evasive import EvasiveControl
from .state.models import FinalChoice, Step
from .state.storage import SessionStorage
from .state.store import PersistedStore
from .steps.dispatcher import StepDispatcher
from .steps.handlers import StepHandlers
from .steps.views import Surface
from .utils.time import Clock, Cooldown

logger = structlog.get_logger(__name__)

# Evasion attempts have their own cooldown and scroll events repeat by nature
UNDEBOUNCED_ACTIONS = frozenset({"no-attempt", "terms-scrolled"})

# Accepted on any view: pointer and scroll events, and the reset control that
# lives outside the step card
UNGATED_ACTIONS = frozenset({"no-attempt", "terms-scrolled", "reset", "restart"})

RESET_ACTIONS = frozenset({"reset", "restart"})

# Actions that read one field of the payload; every other handler takes none
PAYLOAD_FIELDS = {
    "quiz-answer": "answer",
    "select-alt-date": "date",
}


class RevealApp:
    """
    Application context for one reveal session.

    Owns every collaborator explicitly; nothing here is a process global.
    ``start`` renders the first view and must be called from a running event
    loop since the intro animation is started as a task.
    """

    def __init__(
        self,
        config: AppConfig,
        store: PersistedStore,
        sequencer: AnimationSequencer,
        surface: Surface,
        collaborators: Collaborators,
        evasive: EvasiveControl,
        dispatcher: StepDispatcher,
        clock: Optional[Clock] = None
    ) -> None:
        self.logger = logger
        self.config = config
        self.store = store
        self.sequencer = sequencer
        self.epoch = sequencer.epoch
        self.surface = surface
        self.collaborators = collaborators
        self.evasive = evasive
        self.dispatcher = dispatcher
        self.handlers = StepHandlers(store, surface, config, collaborators)
        self.debounce = Cooldown(config.flow.action_debounce_ms, clock)
        self.reset_guard = Cooldown(config.flow.reset_guard_ms, clock)

        self._actions: dict[str, Callable[..., Any]] = {
            "reveal-question": self._next_step,
            "skip-intro": self.skip_intro,
            "yes-click": self._next_step,
            "no-attempt": self.evasive.attempt,
            "no-click": self.evasive.actuate,
            "not-now": self._not_now,
            "quiz-answer": self._quiz_answer,
            "terms-scrolled": self.handlers.mark_terms_scrolled,
            "accept-terms": self.handlers.accept_terms,
            "decline-terms": self.handlers.decline_terms,
            "start-game": self.dispatcher.start_game,
            "skip-game": self._skip_game,
            "retry-game": self._retry_game,
            "next-step": self._next_step,
            "final-yes": self._final_yes,
            "final-different-day": self._final_different_day,
            "select-alt-date": self._select_alt_date,
            "copy-response": self.handlers.copy_response,
            "restart": self.reset,
            "reset": self.reset,
            "continue-exploring": self._continue_exploring,
        }

        self.logger.info(
            "Reveal app initialized",
            current_step=store.get().current_step,
            reduced_motion=sequencer.reduced_motion
        )

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(self._actions)

    def start(self) -> None:
        """Subscribe the dispatcher and render the resumed (or fresh) state."""
        self.dispatcher.attach()

    def shutdown(self) -> None:
        """Detach from the store and release every running step resource."""
        self.dispatcher.detach()
        self.dispatcher.release()
        self.logger.info("Reveal app shut down")

    def handle_action(self, action: str, **data: Any) -> bool:
        """
        Route a user action.

        Args:
            action: Action name as carried by the view
            **data: Action payload, e.g. ``answer`` for quiz answers

        Returns:
            True if the action was dispatched, False if it was unknown, not
            offered by the mounted view or swallowed by a double-trigger guard
        """
        handler = self._actions.get(action)
        if handler is None:
            self.logger.warning("Ignoring unknown action", action=action)
            return False

        view = self.surface.view
        if action not in UNGATED_ACTIONS and (view is None or not view.offers(action)):
            self.logger.warning(
                "Ignoring action not offered by the current view",
                action=action,
                view=view.name if view is not None else None
            )
            return False

        guard = self.reset_guard if action in RESET_ACTIONS else self.debounce
        if action not in UNDEBOUNCED_ACTIONS and not guard.try_acquire():
            self.logger.debug("Action debounced", action=action)
            return False

        self.logger.debug("Handling action", action=action, data=data)
        field = PAYLOAD_FIELDS.get(action)
        if field is None:
            handler()
        else:
            handler(data.get(field))
        return True

    # Page events

    def on_visibility_change(self, hidden: bool) -> None:
        if hidden:
            self.dispatcher.stop_game()

    def on_resize(self) -> None:
        self.dispatcher.render()

    def reset(self) -> None:
        """Stop everything in flight and go back to a fresh intro."""
        self.dispatcher.stop_game()
        self.collaborators.particles.clear()
        self.dispatcher.stop_bonus_effect()
        self.epoch.advance()
        self.evasive.reset()

        # Notifies the dispatcher, which renders the fresh intro
        self.store.reset()

        self.collaborators.toasts.show(self.config.content.reset_message)
        self.logger.info("Reveal app reset")

    def skip_intro(self) -> None:
        """Cancel the intro run and land on the same view natural completion gives."""
        if self.store.get().step != Step.INTRO:
            return
        self.epoch.advance()
        self.evasive.reset()
        self.store.set(countdown_complete=True)

    # Action handlers

    def _next_step(self) -> None:
        self.store.next_step()

    def _not_now(self) -> None:
        if self.store.get().escape_hatch_visible:
            self.store.enter_not_now_path()

    def _quiz_answer(self, answer: Any) -> None:
        try:
            index = int(answer)
        except (TypeError, ValueError):
            self.logger.warning("Ignoring malformed quiz answer", answer=answer)
            return
        self.handlers.answer_quiz(index)

    def _skip_game(self) -> None:
        self.dispatcher.stop_game()
        self.store.set(game_complete=True, game_score=0)

    def _retry_game(self) -> None:
        self.store.set(game_complete=False)

    def _final_yes(self) -> None:
        self.store.set(final_choice=FinalChoice.YES)

    def _final_different_day(self) -> None:
        self.store.set(final_choice=FinalChoice.DIFFERENT_DAY)

    def _select_alt_date(self, date: Any) -> None:
        try:
            index = int(date)
        except (TypeError, ValueError):
            self.logger.warning("Ignoring malformed alternative date", date=date)
            return
        self.handlers.select_alternative_date(index)

    def _continue_exploring(self) -> None:
        self.store.exit_not_now_path(continue_flow=True)


def build_app(
    config: Optional[AppConfig] = None,
    storage: Optional[SessionStorage] = None,
    collaborators: Optional[Collaborators] = None,
    surface: Optional[Surface] = None,
    sleep: Optional[SleepFunc] = None,
    clock: Optional[Clock] = None,
    rng: Optional[random.Random] = None,
    reduced_motion: Optional[bool] = None
) -> RevealApp:
    """
    Build a reveal app from configuration.

    Args:
        config: Application configuration, defaults when omitted
        storage: Session storage backend, in-memory when omitted
        collaborators: External collaborators, logging defaults when omitted
        surface: Render target, a full-capability surface when omitted
        sleep: Async sleep used by animations and the game timer
        clock: Millisecond clock used by the debounce and cooldown windows
        rng: Random source for the evasive control
        reduced_motion: Overrides ``config.sequencer.reduced_motion``

    Returns:
        A wired RevealApp; call ``start`` from a running event loop
    """
    config = config or get_default_config()
    collaborators = collaborators or Collaborators()
    surface = surface or Surface()
    if reduced_motion is None:
        reduced_motion = config.sequencer.reduced_motion

    store = PersistedStore(storage=storage, storage_key=config.flow.storage_key)
    sequencer = AnimationSequencer(
        AnimationEpoch(),
        reduced_motion=reduced_motion,
        reduced_motion_factor=config.sequencer.reduced_motion_factor,
        sleep=sleep,
    )
    evasive = EvasiveControl(
        store,
        collaborators.toasts,
        config.evasion,
        config.content,
        reduced_motion=reduced_motion,
        rng=rng,
        clock=clock,
    )
    dispatcher = StepDispatcher(
        store,
        sequencer,
        surface,
        config,
        collaborators,
        evasive,
        game_sleep=sleep,
    )

    return RevealApp(
        config=config,
        store=store,
        sequencer=sequencer,
        surface=surface,
        collaborators=collaborators,
        evasive=evasive,
        dispatcher=dispatcher,
        clock=clock,
    )
