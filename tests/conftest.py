"""Pytest configuration and shared fixtures."""

import asyncio
import random
from typing import Callable, Optional

import pytest

from reveal_app.collaborators import Collaborators, MemoryClipboard, ToastLog
from reveal_app.config.defaults import AppConfig, get_default_config
from reveal_app.state.storage import MemorySessionStorage
from reveal_app.state.store import PersistedStore
from reveal_app.steps.views import Surface


class RecordingSleep:
    """Async sleep stand-in: records every delay and only yields to the loop."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)

    @property
    def total(self) -> float:
        return sum(self.calls)


class FakeClock:
    """Millisecond clock driven by the test."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeGame:
    """Mini-game collaborator that finishes only when the test says so."""

    def __init__(self) -> None:
        self.surface: Optional[Surface] = None
        self.on_complete: Optional[Callable[[bool, int], None]] = None
        self.init_calls = 0
        self.start_calls = 0
        self.stop_calls = 0

    def init(self, surface: Surface, on_complete: Callable[[bool, int], None]) -> None:
        self.surface = surface
        self.on_complete = on_complete
        self.init_calls += 1

    def start(self) -> None:
        self.start_calls += 1

    def stop(self) -> None:
        self.stop_calls += 1

    def finish(self, won: bool, score: int) -> None:
        assert self.on_complete is not None
        self.on_complete(won, score)


class FakeBonusEffect:
    def __init__(self) -> None:
        self.init_calls = 0
        self.start_calls = 0
        self.stop_calls = 0

    def init(self, surface: Surface) -> None:
        self.init_calls += 1

    def start(self) -> None:
        self.start_calls += 1

    def stop(self) -> None:
        self.stop_calls += 1


class FakeParticles:
    def __init__(self) -> None:
        self.bursts = 0
        self.clears = 0

    def fire(self, x: float, y: float, count: int = 50) -> None:
        return None

    def burst(self) -> None:
        self.bursts += 1

    def clear(self) -> None:
        self.clears += 1


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(now=10_000.0)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def config() -> AppConfig:
    return get_default_config()


@pytest.fixture
def storage() -> MemorySessionStorage:
    return MemorySessionStorage()


@pytest.fixture
def store(storage: MemorySessionStorage) -> PersistedStore:
    return PersistedStore(storage=storage)


@pytest.fixture
def surface() -> Surface:
    return Surface()


@pytest.fixture
def toasts() -> ToastLog:
    return ToastLog()


@pytest.fixture
def game() -> FakeGame:
    return FakeGame()


@pytest.fixture
def bonus_effect() -> FakeBonusEffect:
    return FakeBonusEffect()


@pytest.fixture
def particles() -> FakeParticles:
    return FakeParticles()


@pytest.fixture
def collaborators(
    toasts: ToastLog,
    particles: FakeParticles,
    game: FakeGame,
    bonus_effect: FakeBonusEffect
) -> Collaborators:
    return Collaborators(
        toasts=toasts,
        particles=particles,
        clipboard=MemoryClipboard(),
        game=game,
        bonus_effect=bonus_effect,
    )
