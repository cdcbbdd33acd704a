"""
Step dispatcher.

Renders the view for the current application state onto the surface. It is
the sole store subscriber responsible for view selection: every notification
re-renders from the latest state. The dispatcher also owns the resources a
step starts (animation runs, the game session, the bonus effect) and releases
them when the user leaves that step.
"""

import asyncio
from typing import Any, Callable, Coroutine, Optional, Union

from ..animation.epoch import EpochToken
from ..animation.scripts import analysis_reveal_beats, countdown_beats, intro_narrative_beats
from ..animation.sequencer import AnimationSequencer
from ..collaborators import Collaborators
from ..config.defaults import AppConfig
from ..controls.evasive import EvasiveControl
from ..errors import CollaboratorUnavailableError
from ..logging.config import get_state_logger, log_state_transition
from ..state.models import ApplicationState, FinalChoice, Step
from ..state.store import PersistedStore
from .session import GameSession
from .views import BONUS_CANVAS, GAME_CANVAS, Action, Surface, View, ViewLine

logger = get_state_logger(__name__)

NOT_NOW = "not_now"

ViewKey = Union[Step, str]

ANIMATED_STEPS = (Step.INTRO, Step.AI_ANALYSIS)


class StepDispatcher:
    """Maps state to one of the step renderers and manages per-step resources."""

    def __init__(
        self,
        store: PersistedStore,
        sequencer: AnimationSequencer,
        surface: Surface,
        config: AppConfig,
        collaborators: Collaborators,
        evasive: EvasiveControl,
        game_sleep: Optional[Callable[[float], Any]] = None
    ) -> None:
        self.store = store
        self.sequencer = sequencer
        self.epoch = sequencer.epoch
        self.surface = surface
        self.config = config
        self.content = config.content
        self.collaborators = collaborators
        self.evasive = evasive
        self.logger = logger

        self._renderers: dict[Step, Callable[[ApplicationState], View]] = {
            Step.INTRO: self._render_intro,
            Step.QUESTION: self._render_question,
            Step.QUIZ: self._render_quiz,
            Step.TERMS: self._render_terms,
            Step.GAME: self._render_game,
            Step.AI_ANALYSIS: self._render_analysis,
            Step.FINAL: self._render_final,
        }

        self._active: Optional[ViewKey] = None
        self._animation: Optional[asyncio.Task] = None
        self._game_session: Optional[GameSession] = None
        self._game_sleep = game_sleep
        self._bonus_running = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    # Subscription

    def attach(self) -> Callable[[], None]:
        """Subscribe to the store and render once."""
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_state_change)
        self.render()
        return self.detach

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_state_change(self, state: ApplicationState, previous: ApplicationState) -> None:
        self.render()

    # Dispatch

    def render(self) -> View:
        """Render the latest state; the not-now path overrides step dispatch."""
        state = self.store.get()
        key: ViewKey = NOT_NOW if state.not_now_path else state.step

        if key != self._active:
            self._leave(self._active, key)
            log_state_transition(
                self.logger,
                from_step=self._key_name(self._active),
                to_step=self._key_name(key),
                trigger="render",
                context={"current_step": state.current_step}
            )
            self._active = key

        if key == NOT_NOW:
            view = self._render_not_now(state)
        else:
            view = self._renderers[state.step](state)
            self._update_progress(state)

        return view

    @property
    def active_view(self) -> Optional[ViewKey]:
        return self._active

    @property
    def animation_running(self) -> bool:
        return self._animation is not None and not self._animation.done()

    @property
    def game_session(self) -> Optional[GameSession]:
        return self._game_session

    async def wait_idle(self) -> None:
        """Wait until no animation run is in flight."""
        while self.animation_running:
            await self._animation

    def release(self) -> None:
        """Cancel animations and stop every running step resource."""
        if self.animation_running:
            self.epoch.advance()
        self._stop_game()
        self.stop_bonus_effect()

    def _leave(self, previous: Optional[ViewKey], current: ViewKey) -> None:
        if previous in ANIMATED_STEPS and self.animation_running:
            self.epoch.advance()
        if previous == Step.GAME:
            self._stop_game()
        if previous == Step.FINAL:
            self.stop_bonus_effect()

    @staticmethod
    def _key_name(key: Optional[ViewKey]) -> str:
        if key is None:
            return "none"
        if isinstance(key, Step):
            return key.name.lower()
        return key

    # Animations

    def _start_animation(self, run: Callable[[EpochToken], Coroutine[Any, Any, bool]]) -> None:
        """Start a sequencer run, superseding any run still in flight."""
        if self.animation_running:
            self.epoch.advance()
        token = self.epoch.token()
        self._animation = asyncio.get_running_loop().create_task(run(token))

    # Step renderers

    def _render_intro(self, state: ApplicationState) -> View:
        if state.countdown_complete:
            return self.surface.mount(View(
                name="intro_ready",
                step=Step.INTRO,
                emoji="💌",
                title="Something important is waiting for you...",
                subtitle="Are you ready?",
                actions=[Action("reveal-question", "Reveal the Question")],
            ))

        view = self.surface.mount(View(
            name="intro",
            step=Step.INTRO,
            actions=[Action("skip-intro", "Skip >>")],
        ))
        params = self.config.sequencer

        def run(token: EpochToken) -> Coroutine[Any, Any, bool]:
            return self.sequencer.run_phases(
                [
                    lambda: intro_narrative_beats(view, self.content, params),
                    lambda: countdown_beats(view, self.content, params),
                ],
                token,
                on_complete=lambda: self.store.set(countdown_complete=True),
            )

        self._start_animation(run)
        return view

    def _render_question(self, state: ApplicationState) -> View:
        look = self.evasive.appearance()
        actions = [
            Action("yes-click", "Yes! 🤝"),
            Action("no-click", look.label, data={
                "offset": look.offset,
                "scale": look.scale,
                "actuatable": look.actuatable,
            }),
        ]
        if state.escape_hatch_visible:
            actions.append(Action("not-now", self.content.escape_hatch_text))

        return self.surface.mount(View(
            name="question",
            step=Step.QUESTION,
            emoji="🎉",
            title=self.content.question_title,
            subtitle=self.content.fill(self.content.question_subtitle),
            actions=actions,
            flags={"escape_hatch": state.escape_hatch_visible},
        ))

    def _render_quiz(self, state: ApplicationState) -> View:
        if state.quiz_complete:
            return self._render_quiz_results()

        questions = self.content.quiz_questions
        index = min(state.quiz_current_question, len(questions) - 1)
        question = questions[index]

        return self.surface.mount(View(
            name="quiz_question",
            step=Step.QUIZ,
            emoji="🔬",
            title="Very Scientific Compatibility Quiz",
            subtitle=f"Question {index + 1} of {len(questions)}",
            lines=[ViewLine(question.question)],
            actions=[
                Action("quiz-answer", f"{option.emoji} {option.text}", data={"answer": i})
                for i, option in enumerate(question.options)
            ],
            flags={"quiz_progress": index / len(questions) * 100},
        ))

    def _render_quiz_results(self) -> View:
        return self.surface.mount(View(
            name="quiz_results",
            step=Step.QUIZ,
            emoji="📊",
            title="The Results Are In!",
            subtitle=f"Compatibility score: {self.content.quiz_score_label}",
            lines=[
                ViewLine(category.label, f"{category.value}%")
                for category in self.content.quiz_result_categories
            ],
            actions=[Action("next-step", "On to the Legal Formalities 📜")],
        ))

    def _render_terms(self, state: ApplicationState) -> View:
        lines = []
        for section in self.content.terms_sections:
            lines.append(ViewLine(section.title))
            lines.extend(ViewLine(clause) for clause in section.clauses)
        lines.append(ViewLine("✨ End of Contract ✨"))

        return self.surface.mount(View(
            name="terms",
            step=Step.TERMS,
            emoji="📋",
            title="Friendship Contract",
            subtitle="Please review the following terms carefully",
            lines=lines,
            actions=[
                Action("accept-terms", "I accept 🤝", enabled=state.terms_scrolled),
                Action("decline-terms", "Decline"),
            ],
            flags={
                "scroll_hint": "✓ You read the terms!" if state.terms_scrolled
                else "↓ Scroll to the bottom to continue",
            },
        ))

    def _render_game(self, state: ApplicationState) -> View:
        flow = self.config.flow

        if state.game_complete:
            won = state.game_score >= flow.game_target_score
            actions = [Action("next-step", "Continue")]
            if not won:
                actions.append(Action("retry-game", "Try again"))
            return self.surface.mount(View(
                name="game_complete",
                step=Step.GAME,
                emoji="🎉" if won else "😅",
                title="Incredible!" if won else "Nice try!",
                subtitle="Your catching skills are impressive!" if won
                else "The stars were fast today, but your effort is a 10/10!",
                actions=actions,
                flags={"won": won, "score": state.game_score},
            ))

        session = self._game_session
        running = session is not None and session.running
        can_play = self.collaborators.game is not None and self.surface.has(GAME_CANVAS)

        return self.surface.mount(View(
            name="game",
            step=Step.GAME,
            emoji="🎮",
            title="Little Challenge!",
            subtitle=f"Catch {flow.game_target_score} stars in {flow.game_duration_s} seconds!",
            actions=[
                Action("start-game", "Start the Game", visible=can_play and not running),
                Action("skip-game", "Skip the game"),
            ],
            flags={
                "running": running,
                "time_left": session.time_left if running else flow.game_duration_s,
            },
        ))

    def _render_analysis(self, state: ApplicationState) -> View:
        complete = state.ai_complete
        view = self.surface.mount(View(
            name="ai_analysis",
            step=Step.AI_ANALYSIS,
            emoji="🤖",
            title="Friendship AI Decision Engine™",
            subtitle="Analyzing compatibility data...",
            lines=[
                ViewLine(result.label, result.value, visible=complete)
                for result in self.content.ai_analysis_results
            ],
            actions=[Action("next-step", "Finalize the Decision", visible=complete)],
            flags={
                "conclusion": self.content.ai_conclusion,
                "conclusion_visible": complete,
            },
        ))

        if not complete:
            params = self.config.sequencer

            def run(token: EpochToken) -> Coroutine[Any, Any, bool]:
                return self.sequencer.run_phases(
                    [lambda: analysis_reveal_beats(view, params)],
                    token,
                    on_complete=lambda: self.store.set(ai_complete=True),
                )

            self._start_animation(run)

        return view

    def _render_final(self, state: ApplicationState) -> View:
        if state.final_choice == FinalChoice.YES:
            return self._render_celebration()
        if state.final_choice == FinalChoice.DIFFERENT_DAY:
            return self._render_alternative_dates()

        return self.surface.mount(View(
            name="final",
            step=Step.FINAL,
            emoji="💌",
            title="✨ Special message ✨",
            lines=[ViewLine(paragraph) for paragraph in self.content.sincere_message.split("\n\n")],
            actions=[
                Action("final-yes", "Yes, count me in! 🎉"),
                Action("final-different-day", "Let's pick another day"),
            ],
        ))

    def _render_celebration(self) -> View:
        first_mount = self.surface.view_name != "celebration"
        content = self.content

        view = self.surface.mount(View(
            name="celebration",
            step=Step.FINAL,
            emoji="🥳",
            title="It's official!",
            subtitle="This is going to be an amazing night! 🎉",
            lines=[
                ViewLine("📅", content.date_suggestion),
                ViewLine("📍", content.location_suggestion),
            ] + [ViewLine(quote.text, quote.author) for quote in content.friend_quotes],
            actions=[Action("copy-response", "Copy the Reply Message 📋")],
            flags={"quotes": len(content.friend_quotes)},
        ))

        if first_mount:
            self.collaborators.particles.burst()
            self._start_bonus_effect()

        return view

    def _render_alternative_dates(self) -> View:
        first_mount = self.surface.view_name != "alternative_dates"

        view = self.surface.mount(View(
            name="alternative_dates",
            step=Step.FINAL,
            emoji="📅",
            title="No Problem!",
            subtitle="Here are a few alternatives:",
            actions=[
                Action("select-alt-date", date, data={"date": i})
                for i, date in enumerate(self.content.alternative_dates)
            ],
        ))

        if first_mount:
            self.collaborators.particles.burst()

        return view

    def _render_not_now(self, state: ApplicationState) -> View:
        view = self.surface.mount(View(
            name=NOT_NOW,
            emoji="💛",
            title="No worries!",
            subtitle="Thanks for playing along with my little site. I appreciate you taking a look!",
            actions=[
                Action("restart", "Play again 🔄"),
                Action("continue-exploring", "Keep Exploring the Fun Stuff"),
            ],
        ))
        self.surface.progress.percent = 100.0
        self.surface.progress.label = "No worries! 💛"
        return view

    def _update_progress(self, state: ApplicationState) -> None:
        last = state.total_steps - 1
        self.surface.progress.percent = state.current_step / last * 100
        self.surface.progress.label = f"Step {state.current_step} of {last}"

    # Game session

    def start_game(self) -> bool:
        """Start a game session on the game step; degrade quietly when it cannot run."""
        state = self.store.get()
        if state.not_now_path or state.step != Step.GAME or state.game_complete:
            return False
        if self._game_session is not None and self._game_session.running:
            return False

        try:
            session = GameSession(
                game=self.collaborators.game,
                surface=self.surface,
                duration_s=self.config.flow.game_duration_s,
                on_finish=self._on_game_finished,
                sleep=self._game_sleep,
            )
        except CollaboratorUnavailableError as e:
            self.logger.warning(
                "Game unavailable, only skipping is offered",
                collaborator=e.collaborator,
                error=str(e)
            )
            return False

        self._game_session = session
        session.start()
        self.render()
        return True

    def stop_game(self) -> None:
        """Stop the running game session, e.g. when the page is hidden."""
        self._stop_game()

    def _on_game_finished(self, won: bool, score: int) -> None:
        self.store.set(game_complete=True, game_score=max(0, int(score)))

    def _stop_game(self) -> None:
        if self._game_session is not None:
            self._game_session.stop()
            self._game_session = None

    # Bonus effect

    def _start_bonus_effect(self) -> None:
        effect = self.collaborators.bonus_effect
        if effect is None or not self.surface.has(BONUS_CANVAS):
            self.logger.debug("Bonus effect unavailable, skipping")
            return
        effect.init(self.surface)
        effect.start()
        self._bonus_running = True

    def stop_bonus_effect(self) -> None:
        """Stop the bonus effect if this dispatcher started it."""
        if self._bonus_running and self.collaborators.bonus_effect is not None:
            self.collaborators.bonus_effect.stop()
        self._bonus_running = False
