"""Tests for logging integration in the store, control and dispatcher."""

import asyncio
from unittest.mock import Mock

import structlog
import structlog.testing

from reveal_app.animation.epoch import AnimationEpoch
from reveal_app.animation.sequencer import AnimationSequencer, Beat
from reveal_app.config.content import ContentConfig
from reveal_app.config.defaults import EvasionParams
from reveal_app.controls.evasive import EvasiveControl
from reveal_app.errors import StorageUnavailableError
from reveal_app.logging.config import (
    configure_logging, get_animation_logger, get_state_logger, log_state_transition
)
from reveal_app.state.storage import MemorySessionStorage, UnavailableStorage
from reveal_app.state.store import STORAGE_KEY, PersistedStore


class TestLoggingIntegration:
    """Test structured log entries for state changes and degraded paths."""

    def setup_method(self):
        """Set up test environment with logging capture."""
        configure_logging(level="DEBUG", format_json=True)

        self.log_messages = []
        self.mock_logger = Mock()

        def capture(level):
            def log(message, **kwargs):
                self.log_messages.append({
                    'message': message,
                    'level': level,
                    'kwargs': kwargs
                })
            return log

        self.mock_logger.info = capture('info')
        self.mock_logger.warning = capture('warning')
        self.mock_logger.debug = capture('debug')

    def teardown_method(self):
        structlog.reset_defaults()

    def test_storage_failure_logged_as_warning(self):
        store = PersistedStore(storage=MemorySessionStorage())
        store.logger = self.mock_logger
        store.storage = UnavailableStorage()

        store.set(no_attempts=1)

        assert len(self.log_messages) == 1
        assert self.log_messages[0]['level'] == 'warning'
        assert self.log_messages[0]['kwargs']['storage_key'] == STORAGE_KEY

    def test_reset_logged(self):
        store = PersistedStore()
        store.logger = self.mock_logger
        store.set(current_step=3)

        store.reset()

        assert self.log_messages[-1]['message'] == "State reset to defaults"
        assert self.log_messages[-1]['kwargs']['previous_step'] == 3

    def test_evasion_and_disarm_logged(self):
        now = [0.0]
        store = PersistedStore()
        control = EvasiveControl(
            store, Mock(), EvasionParams(threshold=2), ContentConfig(), clock=lambda: now[0]
        )
        control.logger = self.mock_logger

        for _ in range(2):
            now[0] += 1000
            control.attempt()

        messages = [m['message'] for m in self.log_messages]
        assert messages == ["Evasive control dodged", "Evasive control dodged", "Escape hatch revealed"]
        assert self.log_messages[1]['kwargs']['threshold'] == 2

    def test_cancellation_is_debug_only(self):
        epoch = AnimationEpoch()

        async def sleep(seconds):
            epoch.advance()

        sequencer = AnimationSequencer(epoch, sleep=sleep)
        sequencer.logger = self.mock_logger

        asyncio.run(sequencer.run([Beat(Mock(), 100), Beat(Mock())]))

        assert [m['level'] for m in self.log_messages] == ['debug']
        assert self.log_messages[0]['kwargs']['live_epoch'] == 1

    def test_log_state_transition_binds_context(self):
        bound = Mock()
        logger = Mock()
        logger.bind.return_value = bound
        bound.bind.return_value = bound

        log_state_transition(logger, "intro", "question", "render", {"current_step": 1})

        logger.bind.assert_called_once_with(
            from_step="intro", to_step="question", trigger="render", event="step_transition"
        )
        bound.bind.assert_called_once_with(context={"current_step": 1})
        bound.info.assert_called_once_with("Step transition")

    def test_subsystem_loggers_bind_context(self):
        with structlog.testing.capture_logs() as logs:
            get_state_logger("test").info("state event", field="x")
            get_animation_logger("test").debug("animation event")

        assert logs[0]["subsystem"] == "state_store"
        assert logs[0]["audit_trail"] is True
        assert logs[1]["subsystem"] == "animation"
        assert logs[1]["log_level"] == "debug"

    def test_configure_logging_selects_renderer(self):
        configure_logging(level="INFO", format_json=True)
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

        configure_logging(level="INFO", format_json=False)
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_configure_logging_optional_processors(self):
        configure_logging(level="INFO", include_timestamp=False, include_caller=True)
        kinds = [type(p) for p in structlog.get_config()["processors"]]
        assert structlog.processors.TimeStamper not in kinds
        assert structlog.processors.CallsiteParameterAdder in kinds

        configure_logging(level="INFO")
        kinds = [type(p) for p in structlog.get_config()["processors"]]
        assert structlog.processors.TimeStamper in kinds
        assert structlog.processors.CallsiteParameterAdder not in kinds

    def test_storage_error_message_in_log(self):
        store = PersistedStore(storage=MemorySessionStorage())
        store.logger = self.mock_logger
        store.storage = Mock()
        store.storage.set_item.side_effect = StorageUnavailableError("quota exceeded")

        store.set(game_score=1)

        assert self.log_messages[0]['kwargs']['error'] == "quota exceeded"
