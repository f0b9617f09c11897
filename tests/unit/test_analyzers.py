# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the signal analyzers.

Tests cover:
- Behavioural rules and trigger tags
- Performance rules and intensity scaling
- Text classifier validation, clamping and fallback
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from eduaffect.core.emotional import (
    TEXT_ANALYSIS_FALLBACK,
    BehavioralSignalAnalyzer,
    EmotionType,
    LearningContext,
    PerformanceSignalAnalyzer,
    TextSignalAnalyzer,
)
from eduaffect.core.emotional.context import BehavioralTelemetry, PerformanceTelemetry


def behavior(**overrides: Any) -> BehavioralTelemetry:
    fields = {
        "response_time": 5.0,
        "error_rate": 0.2,
        "help_seeking": False,
        "task_switching": 0,
        "engagement_level": 0.5,
    }
    fields.update(overrides)
    return BehavioralTelemetry(**fields)


def performance(**overrides: Any) -> PerformanceTelemetry:
    fields = {
        "current_score": 60.0,
        "expected_score": 60.0,
        "difficulty_level": 5,
        "attempts": 1,
    }
    fields.update(overrides)
    return PerformanceTelemetry(**fields)


# =============================================================================
# Behavioural analyzer
# =============================================================================


@pytest.mark.unit
class TestBehavioralSignalAnalyzer:
    """Tests for BehavioralSignalAnalyzer."""

    def setup_method(self) -> None:
        self.analyzer = BehavioralSignalAnalyzer()

    def test_neutral_behaviour_is_calm(self) -> None:
        result = self.analyzer.analyze(behavior())

        assert result.primary_emotion == EmotionType.CALM
        assert result.intensity == 0.5
        assert result.confidence == 0.7
        assert result.triggers == ()

    def test_slow_and_wrong_is_frustration_boosted_by_error_rate(self) -> None:
        result = self.analyzer.analyze(
            behavior(response_time=15, error_rate=0.8, help_seeking=True, engagement_level=0.4)
        )

        assert result.primary_emotion == EmotionType.FRUSTRATION
        assert result.intensity == pytest.approx(1.0)
        assert result.triggers == (
            "slow_responses_with_errors",
            "high_error_rate",
            "seeking_help_when_frustrated",
        )

    def test_slow_with_moderate_errors_is_frustration(self) -> None:
        result = self.analyzer.analyze(behavior(response_time=15, error_rate=0.6))

        assert result.primary_emotion == EmotionType.FRUSTRATION
        assert result.intensity >= 0.7
        assert result.triggers == ("slow_responses_with_errors",)

    def test_slow_but_accurate_is_confusion(self) -> None:
        result = self.analyzer.analyze(behavior(response_time=12, error_rate=0.2))

        assert result.primary_emotion == EmotionType.CONFUSION
        assert result.intensity == 0.6
        assert result.triggers == ("slow_deliberate_responses",)

    def test_rushed_with_errors_is_anxiety(self) -> None:
        result = self.analyzer.analyze(behavior(response_time=1, error_rate=0.4))

        assert result.primary_emotion == EmotionType.ANXIETY
        assert result.triggers == ("rushed_responses_with_errors",)

    def test_quick_and_accurate_then_low_error_rate_is_satisfaction(self) -> None:
        result = self.analyzer.analyze(behavior(response_time=1, error_rate=0.05))

        assert result.primary_emotion == EmotionType.SATISFACTION
        assert result.intensity == 0.6
        assert result.triggers == ("quick_accurate_responses", "low_error_rate")

    def test_proactive_help_seeking_is_curiosity(self) -> None:
        result = self.analyzer.analyze(behavior(help_seeking=True))

        assert result.primary_emotion == EmotionType.CURIOSITY
        assert result.triggers == ("proactive_help_seeking",)

    def test_task_switching_is_boredom(self) -> None:
        result = self.analyzer.analyze(behavior(task_switching=4))

        assert result.primary_emotion == EmotionType.BOREDOM
        assert result.intensity == 0.6
        assert "frequent_task_switching" in result.triggers

    def test_low_engagement_overrides_everything(self) -> None:
        result = self.analyzer.analyze(behavior(response_time=15, error_rate=0.9, engagement_level=0.1))

        assert result.primary_emotion == EmotionType.BOREDOM
        assert result.intensity == 0.7
        assert result.triggers[-1] == "low_engagement"

    def test_high_engagement_only_promotes_calm(self) -> None:
        calm = self.analyzer.analyze(behavior(engagement_level=0.9))
        anxious = self.analyzer.analyze(behavior(response_time=1, error_rate=0.4, engagement_level=0.9))

        assert calm.primary_emotion == EmotionType.FOCUS
        assert calm.intensity == 0.8
        assert calm.triggers == ("high_engagement",)
        assert anxious.primary_emotion == EmotionType.ANXIETY


# =============================================================================
# Performance analyzer
# =============================================================================


@pytest.mark.unit
class TestPerformanceSignalAnalyzer:
    """Tests for PerformanceSignalAnalyzer."""

    def setup_method(self) -> None:
        self.analyzer = PerformanceSignalAnalyzer()

    def test_on_target_is_calm(self) -> None:
        result = self.analyzer.analyze(performance())

        assert result.primary_emotion == EmotionType.CALM
        assert result.intensity == 0.5
        assert result.triggers == ()

    def test_exceeding_expectations_is_pride(self) -> None:
        result = self.analyzer.analyze(performance(current_score=90, expected_score=60))

        assert result.primary_emotion == EmotionType.PRIDE
        assert result.intensity == pytest.approx(0.8)
        assert result.triggers == ("exceeding_expectations",)

    def test_underperforming_is_disappointment(self) -> None:
        result = self.analyzer.analyze(performance(current_score=40, expected_score=80, attempts=2))

        assert result.primary_emotion == EmotionType.DISAPPOINTMENT
        assert result.intensity == pytest.approx(0.9)
        assert result.triggers == ("underperforming",)

    def test_gap_of_exactly_thirty_points_is_not_underperforming(self) -> None:
        result = self.analyzer.analyze(performance(current_score=50, expected_score=80))

        assert result.primary_emotion == EmotionType.CALM

    def test_success_at_difficult_task_is_pride(self) -> None:
        result = self.analyzer.analyze(performance(current_score=75, expected_score=70, difficulty_level=9))

        assert result.primary_emotion == EmotionType.PRIDE
        assert result.intensity == 0.8
        assert result.triggers == ("succeeding_at_difficult_task",)

    def test_struggling_with_easy_task_is_confusion(self) -> None:
        result = self.analyzer.analyze(performance(current_score=40, expected_score=45, difficulty_level=2))

        assert result.primary_emotion == EmotionType.CONFUSION
        assert result.triggers == ("struggling_with_easy_task",)

    def test_many_attempts_with_success_is_determination(self) -> None:
        result = self.analyzer.analyze(performance(current_score=70, expected_score=65, attempts=6))

        assert result.primary_emotion == EmotionType.DETERMINATION
        assert result.triggers[-1] == "persistence_paid_off"

    def test_many_attempts_without_success_is_frustration(self) -> None:
        result = self.analyzer.analyze(performance(current_score=20, expected_score=70, attempts=7))

        assert result.primary_emotion == EmotionType.FRUSTRATION
        assert result.intensity == 0.8
        assert result.triggers == ("underperforming", "many_unsuccessful_attempts")


# =============================================================================
# Text analyzer
# =============================================================================


@pytest.mark.unit
class TestTextSignalAnalyzer:
    """Tests for TextSignalAnalyzer."""

    @pytest.mark.asyncio
    async def test_valid_payload_is_passed_through(
        self,
        static_classifier,
        learning_context: LearningContext,
    ) -> None:
        analyzer = TextSignalAnalyzer(static_classifier)

        result = await analyzer.analyze("I hate this", learning_context)

        assert result.primary_emotion == EmotionType.FRUSTRATION
        assert result.secondary_emotions == (EmotionType.CONFUSION,)
        assert result.intensity == 0.9
        assert result.valence == -0.7
        assert result.triggers == ("negative self-talk",)
        assert static_classifier.calls == [("I hate this", learning_context)]

    @pytest.mark.asyncio
    async def test_out_of_range_values_are_clamped(
        self,
        make_classifier,
        learning_context: LearningContext,
    ) -> None:
        analyzer = TextSignalAnalyzer(make_classifier({
            "primary_emotion": "Joy",
            "intensity": 1.7,
            "valence": -3,
            "arousal": -0.2,
            "confidence": 2,
        }))

        result = await analyzer.analyze("yay", learning_context)

        assert result.primary_emotion == EmotionType.JOY
        assert result.intensity == 1.0
        assert result.valence == -1.0
        assert result.arousal == 0.0
        assert result.confidence == 1.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"primary_emotion": "hunger", "intensity": 0.5, "valence": 0, "arousal": 0.5, "confidence": 0.5},
            {"primary_emotion": "joy", "valence": 0, "arousal": 0.5, "confidence": 0.5},
            {
                "primary_emotion": "joy",
                "secondary_emotions": ["pride", "focus", "calm", "interest"],
                "intensity": 0.5,
                "valence": 0,
                "arousal": 0.5,
                "confidence": 0.5,
            },
            {"primary_emotion": "joy", "intensity": "lots", "valence": 0, "arousal": 0.5, "confidence": 0.5},
            {"primary_emotion": "joy", "intensity": "0.9", "valence": 0, "arousal": 0.5, "confidence": 0.5},
            {"primary_emotion": "joy", "intensity": 0.5, "valence": 0, "arousal": 0.5, "confidence": True},
        ],
        ids=[
            "unknown_emotion",
            "missing_intensity",
            "too_many_secondary",
            "non_numeric",
            "numeric_string",
            "boolean_number",
        ],
    )
    async def test_invalid_payload_falls_back(
        self,
        payload: dict[str, Any],
        make_classifier,
        learning_context: LearningContext,
    ) -> None:
        analyzer = TextSignalAnalyzer(make_classifier(payload))

        result = await analyzer.analyze("text", learning_context)

        assert result == TEXT_ANALYSIS_FALLBACK

    @pytest.mark.asyncio
    async def test_classifier_error_falls_back(self, learning_context: LearningContext) -> None:
        classifier = AsyncMock()
        classifier.classify.side_effect = RuntimeError("provider down")
        analyzer = TextSignalAnalyzer(classifier)

        result = await analyzer.analyze("text", learning_context)

        assert result == TEXT_ANALYSIS_FALLBACK
        assert result.primary_emotion == EmotionType.CALM
        assert result.intensity == 0.3
        assert result.confidence == 0.2
        assert result.triggers == ("text_analysis_failed",)

    @pytest.mark.asyncio
    async def test_slow_classifier_times_out_to_fallback(self, learning_context: LearningContext) -> None:
        class SlowClassifier:
            async def classify(self, text, context):
                await asyncio.sleep(5)
                return {}

        analyzer = TextSignalAnalyzer(SlowClassifier(), timeout=0.01)

        result = await analyzer.analyze("text", learning_context)

        assert result == TEXT_ANALYSIS_FALLBACK
