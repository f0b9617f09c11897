# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any

import fakeredis.aioredis
import pytest

from eduaffect.core.config.settings import clear_settings_cache, get_settings
from eduaffect.core.emotional import (
    EmotionalState,
    EmotionType,
    LearningContext,
    PerformanceIndicator,
    SocialContext,
    TechniqueCatalog,
)
from eduaffect.infrastructure.cache import RedisClient

BASE_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (wires several components)"
    )


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_settings() -> None:
    """Drop cached settings around every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def learner_id() -> str:
    """Provide a sample learner ID for testing."""
    return "learner-001"


@pytest.fixture
def session_id() -> str:
    """Provide a sample session ID for testing."""
    return "session-001"


@pytest.fixture
def learning_context() -> LearningContext:
    """Provide a neutral individual quiz context."""
    return LearningContext(
        activity="quiz",
        subject="mathematics",
        difficulty_level=5,
        performance_indicator=PerformanceIndicator.NEUTRAL,
        social_context=SocialContext.INDIVIDUAL,
    )


@pytest.fixture
def context_payload() -> dict[str, Any]:
    """Provide the raw form of a learning context."""
    return {
        "activity": "quiz",
        "subject": "mathematics",
        "difficulty_level": 5,
        "performance_indicator": "neutral",
        "social_context": "individual",
    }


@pytest.fixture
def catalog() -> TechniqueCatalog:
    """Provide the packaged technique catalog."""
    return TechniqueCatalog.from_yaml()


@pytest.fixture
def make_state(learner_id: str, learning_context: LearningContext) -> Callable[..., EmotionalState]:
    """Provide a factory for EmotionalState instances.

    States created by one factory are one minute apart unless a
    timestamp is given.
    """
    sequence = count()

    def _make(
        primary: EmotionType = EmotionType.CALM,
        intensity: float = 0.5,
        *,
        confidence: float = 0.7,
        triggers: tuple[str, ...] = (),
        context: LearningContext | None = None,
        timestamp: datetime | None = None,
        **overrides: Any,
    ) -> EmotionalState:
        n = next(sequence)
        fields: dict[str, Any] = {
            "id": f"state-{n}",
            "timestamp": timestamp or BASE_TIME + timedelta(minutes=n),
            "learner_id": learner_id,
            "session_id": "session-001",
            "primary_emotion": primary,
            "intensity": intensity,
            "valence": 0.0,
            "arousal": 0.5,
            "confidence": confidence,
            "context": context or learning_context,
            "triggers": triggers,
        }
        fields.update(overrides)
        return EmotionalState(**fields)

    return _make


class StaticClassifier:
    """Text classifier returning a fixed payload."""

    def __init__(self, payload: Mapping[str, Any]) -> None:
        self.payload = payload
        self.calls: list[tuple[str, LearningContext]] = []

    async def classify(self, text: str, context: LearningContext) -> Mapping[str, Any]:
        self.calls.append((text, context))
        return self.payload


@pytest.fixture
def frustrated_text_payload() -> dict[str, Any]:
    """Provide a classifier payload for frustrated text."""
    return {
        "primary_emotion": "frustration",
        "secondary_emotions": ["confusion"],
        "intensity": 0.9,
        "valence": -0.7,
        "arousal": 0.8,
        "confidence": 0.9,
        "triggers": ["negative self-talk"],
    }


@pytest.fixture
def make_classifier() -> Callable[[Mapping[str, Any]], StaticClassifier]:
    """Provide a factory for fixed-payload classifiers."""
    return StaticClassifier


@pytest.fixture
def static_classifier(frustrated_text_payload: dict[str, Any]) -> StaticClassifier:
    """Provide a classifier that always reports frustration."""
    return StaticClassifier(frustrated_text_payload)


# =============================================================================
# Redis Fixtures
# =============================================================================


@pytest.fixture
def redis_server() -> fakeredis.FakeServer:
    """Provide an in-memory Redis server private to one test."""
    return fakeredis.FakeServer()


@pytest.fixture
def make_redis_client(redis_server: fakeredis.FakeServer) -> Callable[[], RedisClient]:
    """Provide a factory for RedisClients connected to the test server.

    Every client has its own connection, like separate worker processes
    sharing one Redis.
    """

    def _make() -> RedisClient:
        return RedisClient(
            get_settings(),
            redis=fakeredis.aioredis.FakeRedis(server=redis_server, decode_responses=True),
        )

    return _make
