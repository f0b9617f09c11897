# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Performance signal analyzer.

Maps the gap between achieved and expected score, task difficulty and the
number of attempts onto a candidate emotion. Later rules override earlier
ones; the attempt rule overrides everything.
"""

from eduaffect.core.emotional.constants import EmotionType
from eduaffect.core.emotional.context import LearningContext, PerformanceTelemetry
from eduaffect.core.emotional.state import PerformanceEstimate
from eduaffect.utils.ranges import clamp_unit

SCORE_SCALE = 100.0


class PerformanceSignalAnalyzer:
    """Rule-based analyzer for score and attempt telemetry."""

    def analyze(
        self,
        telemetry: PerformanceTelemetry,
        context: LearningContext | None = None,
    ) -> PerformanceEstimate:
        """Estimate the learner's emotion from performance.

        Args:
            telemetry: Performance telemetry block.
            context: Activity context (currently unused by the rules).

        Returns:
            PerformanceEstimate for the telemetry.
        """
        gap = (telemetry.current_score - telemetry.expected_score) / SCORE_SCALE

        emotion = EmotionType.CALM
        intensity = 0.5
        triggers: list[str] = []

        # Result against expectation
        if gap > 0.2:
            emotion, intensity = EmotionType.PRIDE, min(1.0, 0.5 + gap)
            triggers.append("exceeding_expectations")
        elif gap < -0.3:
            emotion, intensity = EmotionType.DISAPPOINTMENT, min(1.0, 0.5 + abs(gap))
            triggers.append("underperforming")

        # Difficulty
        if telemetry.difficulty_level > 8 and telemetry.current_score > 70:
            emotion, intensity = EmotionType.PRIDE, 0.8
            triggers.append("succeeding_at_difficult_task")
        elif telemetry.difficulty_level < 3 and telemetry.current_score < 50:
            emotion, intensity = EmotionType.CONFUSION, 0.6
            triggers.append("struggling_with_easy_task")

        # Attempts
        if telemetry.attempts > 5:
            if telemetry.current_score > telemetry.expected_score:
                emotion, intensity = EmotionType.DETERMINATION, 0.7
                triggers.append("persistence_paid_off")
            else:
                emotion, intensity = EmotionType.FRUSTRATION, 0.8
                triggers.append("many_unsuccessful_attempts")

        return PerformanceEstimate(
            primary_emotion=emotion,
            intensity=clamp_unit(intensity),
            triggers=tuple(triggers),
        )
