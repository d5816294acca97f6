"""
Shared pytest fixtures for the adaptive boss test suite.

Fixtures:
    dummy: a minimal fighter (Body + take_hit) for the boss to target
    make_boss: factory for an Enemy on a bare Body, optionally in an Arena
    channel_log: an EventChannel plus the list of events it received
"""
import pytest

from ai.events import EventChannel
from entities.enemy import Enemy, EnemyData
from systems.arena import Arena, Body


class DummyFighter:
    """Target stand-in: records every hit it takes."""

    def __init__(self, x: float = 4.0, name: str = "dummy"):
        self.name = name
        self.body = Body(name, x)
        self.alive = True
        self.hits: list[float] = []

    def take_hit(self, amount: float) -> float:
        self.hits.append(amount)
        return amount


class FakeTracker:
    """Stands in for BehaviorTracker: the test sets ``profile`` directly."""

    def __init__(self, profile=None):
        from ai.behavior_analyzer import PlayerProfile
        self.profile = profile or PlayerProfile()


@pytest.fixture
def dummy() -> DummyFighter:
    return DummyFighter()


@pytest.fixture
def channel_log():
    channel = EventChannel("test")
    received: list = []
    channel.subscribe(received.append)
    return channel, received


@pytest.fixture
def make_boss():
    def _make(x: float = 0.0, target=None, in_arena: bool = False,
              channel=None, **data_overrides) -> Enemy:
        body = Body("boss", x)
        if in_arena:
            Arena().add(body)
        boss = Enemy(body, EnemyData(**data_overrides), channel=channel)
        boss.target = target
        return boss
    return _make


@pytest.fixture
def fake_tracker() -> FakeTracker:
    return FakeTracker()
