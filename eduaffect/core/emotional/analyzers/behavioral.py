# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Behavioural signal analyzer.

Maps interaction timing, error rate, help seeking, task switching and
engagement onto a candidate emotion. Rules run in order and a later rule
may override the emotion chosen by an earlier one. Every rule that fires
contributes its name as a trigger tag.
"""

from eduaffect.core.emotional.constants import EmotionType
from eduaffect.core.emotional.context import BehavioralTelemetry, LearningContext
from eduaffect.core.emotional.state import BehavioralEstimate
from eduaffect.utils.ranges import clamp_unit

BEHAVIORAL_CONFIDENCE = 0.7

SLOW_RESPONSE_SECONDS = 10
FAST_RESPONSE_SECONDS = 2


class BehavioralSignalAnalyzer:
    """Rule-based analyzer for behavioural telemetry."""

    def analyze(
        self,
        telemetry: BehavioralTelemetry,
        context: LearningContext | None = None,
    ) -> BehavioralEstimate:
        """Estimate the learner's emotion from behaviour.

        Args:
            telemetry: Behavioural telemetry block.
            context: Activity context (currently unused by the rules).

        Returns:
            BehavioralEstimate with fixed confidence.
        """
        emotion = EmotionType.CALM
        intensity = 0.5
        triggers: list[str] = []

        # Response timing
        if telemetry.response_time > SLOW_RESPONSE_SECONDS:
            if telemetry.error_rate > 0.5:
                emotion, intensity = EmotionType.FRUSTRATION, 0.7
                triggers.append("slow_responses_with_errors")
            else:
                emotion, intensity = EmotionType.CONFUSION, 0.6
                triggers.append("slow_deliberate_responses")
        elif telemetry.response_time < FAST_RESPONSE_SECONDS:
            if telemetry.error_rate > 0.3:
                emotion, intensity = EmotionType.ANXIETY, 0.6
                triggers.append("rushed_responses_with_errors")
            else:
                emotion, intensity = EmotionType.CONFIDENCE, 0.7
                triggers.append("quick_accurate_responses")

        # Error rate
        if telemetry.error_rate > 0.7:
            emotion = EmotionType.FRUSTRATION
            intensity = min(1.0, intensity + 0.3)
            triggers.append("high_error_rate")
        elif telemetry.error_rate < 0.1:
            emotion, intensity = EmotionType.SATISFACTION, 0.6
            triggers.append("low_error_rate")

        # Help seeking
        if telemetry.help_seeking:
            if emotion == EmotionType.FRUSTRATION:
                triggers.append("seeking_help_when_frustrated")
            else:
                emotion, intensity = EmotionType.CURIOSITY, 0.5
                triggers.append("proactive_help_seeking")

        # Restlessness
        if telemetry.task_switching > 3:
            emotion, intensity = EmotionType.BOREDOM, 0.6
            triggers.append("frequent_task_switching")

        # Engagement
        if telemetry.engagement_level < 0.3:
            emotion, intensity = EmotionType.BOREDOM, 0.7
            triggers.append("low_engagement")
        elif telemetry.engagement_level > 0.8 and emotion == EmotionType.CALM:
            emotion, intensity = EmotionType.FOCUS, 0.8
            triggers.append("high_engagement")

        return BehavioralEstimate(
            primary_emotion=emotion,
            intensity=clamp_unit(intensity),
            confidence=BEHAVIORAL_CONFIDENCE,
            triggers=tuple(triggers),
        )
