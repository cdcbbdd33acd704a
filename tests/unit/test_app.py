"""Unit tests for the reveal app coordinator."""

import asyncio

import pytest

from reveal_app.app import RevealApp, build_app
from reveal_app.config.defaults import get_default_config
from reveal_app.config.loader import load_config
from reveal_app.state.models import DEFAULT_STATE, FinalChoice, Step
from reveal_app.state.store import STORAGE_KEY


@pytest.fixture
def make_app(storage, collaborators, recording_sleep, clock, rng):
    def make(**kwargs):
        kwargs.setdefault("storage", storage)
        kwargs.setdefault("collaborators", collaborators)
        return build_app(sleep=recording_sleep, clock=clock, rng=rng, **kwargs)
    return make


@pytest.fixture
def app(make_app):
    return make_app()


def act(app, clock, action, **data):
    """Trigger an action outside the debounce window of the previous one."""
    clock.advance(1000)
    return app.handle_action(action, **data)


def on_step(app, step, **state):
    app.store.set(current_step=step, **state)
    app.start()


class TestBuildApp:

    def test_wires_components(self, app):
        assert isinstance(app, RevealApp)
        assert app.evasive.store is app.store
        assert app.dispatcher.sequencer is app.sequencer
        assert app.epoch is app.sequencer.epoch
        assert app.store.get() == DEFAULT_STATE

    def test_reduced_motion_from_config_or_override(self, make_app):
        config = load_config(overrides={"sequencer": {"reduced_motion": True}})
        assert make_app(config=config).sequencer.reduced_motion is True
        assert make_app(config=config, reduced_motion=False).sequencer.reduced_motion is False

    def test_reduced_motion_reaches_evasive_control(self, make_app):
        app = make_app(reduced_motion=True)
        assert app.evasive.reduced_motion is True

    def test_storage_key_from_config(self, make_app, storage):
        config = load_config(overrides={"flow": {"storage_key": "custom_key"}})
        app = make_app(config=config)
        app.store.set(current_step=1)
        assert "custom_key" in storage
        assert STORAGE_KEY not in storage

    def test_resumes_from_storage(self, make_app):
        make_app().store.set(current_step=Step.QUIZ, quiz_complete=True)

        app = make_app()
        app.start()

        assert app.surface.view_name == "quiz_results"

    def test_every_documented_action_is_routed(self, app):
        assert app.actions == {
            "reveal-question", "skip-intro", "yes-click", "no-attempt", "no-click", "not-now",
            "quiz-answer", "terms-scrolled", "accept-terms", "decline-terms", "start-game",
            "skip-game", "retry-game", "next-step", "final-yes", "final-different-day",
            "select-alt-date", "copy-response", "restart", "reset", "continue-exploring",
        }


class TestHandleAction:
    """Routing and debounce."""

    def test_unknown_action_ignored(self, app):
        on_step(app, Step.QUESTION)
        assert app.handle_action("launch-fireworks") is False
        assert app.store.get().current_step == Step.QUESTION

    def test_double_trigger_debounced(self, app, clock):
        on_step(app, Step.QUESTION)
        assert app.handle_action("yes-click") is True
        clock.advance(299)
        assert app.handle_action("next-step") is False
        assert app.store.get().current_step == Step.QUIZ

        clock.advance(1)
        assert app.handle_action("quiz-answer", answer=0) is True

    def test_evasion_attempts_bypass_debounce(self, app, clock):
        on_step(app, Step.QUESTION)
        act(app, clock, "yes-click")
        app.store.go_to_step(Step.QUESTION)

        assert app.handle_action("no-attempt") is True
        assert app.store.get().no_attempts == 1

    def test_yes_click_cannot_skip_unread_terms(self, app, clock):
        on_step(app, Step.TERMS)

        assert act(app, clock, "yes-click") is False
        assert act(app, clock, "next-step") is False
        assert app.store.get().step == Step.TERMS

    def test_decline_terms_only_on_terms_step(self, app, clock):
        on_step(app, Step.QUIZ)
        act(app, clock, "decline-terms")
        act(app, clock, "decline-terms")

        state = app.store.get()
        assert state.terms_decline_attempts == 0
        assert state.not_now_path is False

    def test_disabled_action_refused(self, app, clock):
        on_step(app, Step.TERMS)
        assert app.surface.view.has_action("accept-terms")
        assert not app.surface.view.offers("accept-terms")

        assert act(app, clock, "accept-terms") is False

    def test_refused_action_does_not_start_debounce(self, app, clock):
        on_step(app, Step.QUESTION)
        assert app.handle_action("skip-game") is False
        assert app.handle_action("yes-click") is True

    def test_nothing_offered_before_start(self, app, clock):
        assert act(app, clock, "reveal-question") is False
        assert app.store.get().current_step == Step.INTRO

    def test_reset_not_swallowed_by_action_debounce(self, app):
        async def main():
            on_step(app, Step.QUESTION)
            assert app.handle_action("yes-click") is True
            reset = app.handle_action("reset")
            app.shutdown()
            return reset

        assert asyncio.run(main()) is True
        assert app.store.get().current_step == Step.INTRO

    def test_reset_has_its_own_guard(self, app, clock, toasts, config):
        async def main():
            on_step(app, Step.QUESTION)
            results = [app.handle_action("reset")]
            clock.advance(config.flow.reset_guard_ms - 1)
            results.append(app.handle_action("restart"))
            clock.advance(1)
            results.append(app.handle_action("restart"))
            app.shutdown()
            return results

        assert asyncio.run(main()) == [True, False, True]
        assert toasts.messages.count(config.content.reset_message) == 2

    def test_view_action_payload_can_be_passed_through(self, app, clock):
        on_step(app, Step.QUESTION)
        no_click = app.surface.view.action("no-click")

        assert act(app, clock, no_click.name, **no_click.data) is True
        assert app.store.get().no_attempts == 1


class TestQuestionActions:

    def test_not_now_needs_escape_hatch(self, app, clock):
        on_step(app, Step.QUESTION)
        act(app, clock, "not-now")
        assert app.store.get().not_now_path is False

        app.store.set(escape_hatch_visible=True)
        act(app, clock, "not-now")
        assert app.surface.view_name == "not_now"

    def test_no_click_after_disarm_enters_not_now(self, app, clock):
        on_step(app, Step.QUESTION)
        for _ in range(6):
            act(app, clock, "no-attempt")
        assert app.surface.view.action("no-click").data["actuatable"] is True

        act(app, clock, "no-click")

        assert app.store.get().not_now_path is True

    def test_continue_exploring_goes_to_quiz(self, app, clock):
        on_step(app, Step.QUESTION, not_now_path=True)
        act(app, clock, "continue-exploring")

        assert app.store.get().step == Step.QUIZ
        assert app.surface.view_name == "quiz_question"


class TestQuizActions:

    def test_answers_advance_then_complete(self, app, clock, config):
        on_step(app, Step.QUIZ)
        total = len(config.content.quiz_questions)

        for i in range(total):
            act(app, clock, "quiz-answer", answer=i % 4)

        state = app.store.get()
        assert state.quiz_complete is True
        assert state.quiz_answers == tuple(i % 4 for i in range(total))
        assert app.surface.view_name == "quiz_results"

    def test_answers_after_completion_ignored(self, app, clock):
        on_step(app, Step.QUIZ, quiz_complete=True, quiz_answers=(0, 0, 0, 0, 0))
        act(app, clock, "quiz-answer", answer=1)
        assert app.store.get().quiz_answers == (0, 0, 0, 0, 0)

    @pytest.mark.parametrize("answer", [-1, 4, "x", None])
    def test_invalid_answer_ignored(self, app, clock, answer):
        on_step(app, Step.QUIZ)
        act(app, clock, "quiz-answer", answer=answer)
        state = app.store.get()
        assert state.quiz_answers == ()
        assert state.quiz_current_question == 0


class TestTermsActions:

    def test_accept_ignored_until_scrolled(self, app, clock):
        on_step(app, Step.TERMS)
        act(app, clock, "accept-terms")
        assert app.store.get().step == Step.TERMS

        app.handle_action("terms-scrolled")
        act(app, clock, "accept-terms")
        assert app.store.get().step == Step.GAME

    def test_first_decline_shakes_and_toasts(self, app, clock, toasts, config):
        on_step(app, Step.TERMS)
        act(app, clock, "decline-terms")

        view = app.surface.view
        assert view.flags["shake"] is True
        assert view.flags["scroll_top"] is True
        assert toasts.last == config.content.terms_decline_message
        assert app.store.get().not_now_path is False

    def test_decline_limit_enters_not_now(self, app, clock):
        on_step(app, Step.TERMS)
        act(app, clock, "decline-terms")
        act(app, clock, "decline-terms")

        state = app.store.get()
        assert state.terms_decline_attempts == 2
        assert state.not_now_path is True


class TestGameActions:

    def test_skip_game_records_zero_score(self, app, clock):
        on_step(app, Step.GAME)
        act(app, clock, "skip-game")

        state = app.store.get()
        assert state.game_complete is True
        assert state.game_score == 0
        assert app.surface.view_name == "game_complete"

    def test_retry_after_loss(self, app, clock):
        on_step(app, Step.GAME, game_complete=True, game_score=3)
        act(app, clock, "retry-game")

        assert app.store.get().game_complete is False
        assert app.surface.view_name == "game"

    def test_page_hidden_stops_game(self, app, clock, game):
        async def main():
            on_step(app, Step.GAME)
            act(app, clock, "start-game")
            session = app.dispatcher.game_session
            app.on_visibility_change(hidden=True)
            return session

        session = asyncio.run(main())

        assert game.stop_calls == 1
        assert session.running is False

    def test_page_visible_leaves_game_running(self, app, clock, game):
        async def main():
            on_step(app, Step.GAME)
            act(app, clock, "start-game")
            app.on_visibility_change(hidden=False)
            running = app.dispatcher.game_session.running
            app.shutdown()
            return running

        assert asyncio.run(main()) is True


class TestFinalActions:

    def test_final_choices(self, make_app, clock):
        app = make_app()
        on_step(app, Step.FINAL)
        act(app, clock, "final-different-day")
        assert app.store.get().final_choice == FinalChoice.DIFFERENT_DAY
        assert app.surface.view_name == "alternative_dates"

        other = make_app(storage=None)
        on_step(other, Step.FINAL)
        act(other, clock, "final-yes")
        assert other.store.get().final_choice == FinalChoice.YES
        assert other.surface.view_name == "celebration"

    def test_choice_is_final_once_made(self, app, clock):
        on_step(app, Step.FINAL, final_choice=FinalChoice.DIFFERENT_DAY)

        assert act(app, clock, "final-yes") is False
        assert app.store.get().final_choice == FinalChoice.DIFFERENT_DAY

    def test_select_alt_date_toasts_and_bursts(self, app, clock, toasts, particles, config):
        on_step(app, Step.FINAL, final_choice=FinalChoice.DIFFERENT_DAY)
        bursts = particles.bursts

        act(app, clock, "select-alt-date", date=1)

        assert toasts.last == config.content.alternative_date_message
        assert particles.bursts == bursts + 1

    @pytest.mark.parametrize("date", ["saturday", None, -1, 99, [1]])
    def test_invalid_alt_date_ignored(self, app, clock, toasts, particles, date):
        on_step(app, Step.FINAL, final_choice=FinalChoice.DIFFERENT_DAY)
        bursts = particles.bursts
        shown = len(toasts.messages)

        assert act(app, clock, "select-alt-date", date=date) is True

        assert particles.bursts == bursts
        assert len(toasts.messages) == shown

    def test_copy_response(self, app, clock, collaborators, toasts, config):
        on_step(app, Step.FINAL, final_choice=FinalChoice.YES)
        act(app, clock, "copy-response")

        assert collaborators.clipboard.text == config.content.copy_message()
        assert toasts.last == config.content.copy_success_message


class TestPageEvents:

    def test_resize_re_renders(self, app):
        on_step(app, Step.QUIZ)
        mounts = app.surface.mount_count

        app.on_resize()

        assert app.surface.mount_count == mounts + 1
        assert app.surface.view_name == "quiz_question"

    def test_reset_from_anywhere(self, app, clock, storage, particles, bonus_effect, toasts, config):
        async def main():
            on_step(app, Step.FINAL, final_choice=FinalChoice.YES, no_attempts=6)
            epoch = app.epoch.value
            act(app, clock, "restart")
            assert app.epoch.value > epoch
            assert app.surface.view_name == "intro"
            app.shutdown()

        asyncio.run(main())

        assert app.store.get() == DEFAULT_STATE
        assert particles.clears == 1
        assert bonus_effect.stop_calls == 1
        assert toasts.last == config.content.reset_message
        assert app.evasive.offset == (0, 0)

    def test_skip_intro_matches_natural_completion(self, make_app, clock):
        natural = make_app()
        skipped = make_app(storage=None)

        async def main():
            natural.start()
            await natural.dispatcher.wait_idle()

            skipped.start()
            await asyncio.sleep(0)
            act(skipped, clock, "skip-intro")
            await skipped.dispatcher.wait_idle()

        asyncio.run(main())

        assert skipped.store.get() == natural.store.get()
        assert skipped.surface.view == natural.surface.view

    def test_skip_intro_ignored_off_intro(self, app, clock):
        on_step(app, Step.QUIZ)
        epoch = app.epoch.value
        act(app, clock, "skip-intro")
        assert app.epoch.value == epoch
        assert app.store.get().countdown_complete is False

    def test_default_config_used_when_omitted(self):
        assert build_app().config == get_default_config()
