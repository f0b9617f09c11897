# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""On-demand emotional insight generation.

Insights are ephemeral: they are derived from the state history and the
profile on every request and never persisted. Four independent
derivations each contribute zero or more insights:

- pattern: dominant primary emotion over the last 10 states
- trigger: most frequent trigger over the whole history
- strength: one per resilience/EQ metric above 0.7
- growth_area: the first metric below its threshold
"""

import math
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import uuid4

from eduaffect.core.emotional.constants import (
    DEFAULT_ACTION_STEPS,
    EMOTION_ACTION_STEPS,
    EmotionalThresholds,
    ImpactLevel,
    InsightType,
)
from eduaffect.core.emotional.profile import EmotionalProfile, ProfileAggregator
from eduaffect.core.emotional.state import EmotionalState
from eduaffect.utils.datetime import format_iso, utc_now

TRIGGER_ACTION_STEPS = [
    "Be mindful when this situation arises",
    "Prepare coping strategies in advance",
    "Consider adjusting learning approach to minimize this trigger",
]

STRENGTH_ACTION_STEPS = [
    "Continue leveraging these strengths",
    "Help peers who might struggle in these areas",
    "Take on challenges that utilize these strengths",
]

GROWTH_AREA_STEPS: dict[str, list[str]] = {
    "Emotional self-awareness": [
        "Check in with your emotions regularly",
        "Keep an emotion journal",
        "Practice naming your emotions specifically",
    ],
    "Emotional recovery speed": [
        "Practice resilience-building exercises",
        "Develop a toolkit of coping strategies",
        "Reflect on past successful recoveries",
    ],
    "Seeking help when needed": [
        "Practice asking questions",
        "Remember that seeking help is a strength",
        "Identify trusted sources of support",
    ],
}

DEFAULT_GROWTH_STEPS = ["Focus on this area in your learning journey"]


def _strength_metrics(profile: EmotionalProfile) -> list[tuple[str, str, float]]:
    """(metric, label, value) for every metric that can be a strength."""
    return [
        ("frustration_tolerance", "High frustration tolerance",
         profile.resilience.frustration_tolerance),
        ("persistence_level", "Strong persistence", profile.resilience.persistence_level),
        ("self_regulation", "Good emotional self-regulation", profile.eq_scores.self_regulation),
    ]


def _growth_metrics(profile: EmotionalProfile) -> list[tuple[str, float, float]]:
    """(label, value, threshold) in priority order."""
    return [
        ("Emotional self-awareness", profile.eq_scores.self_awareness, 0.5),
        ("Emotional recovery speed", profile.resilience.recovery_speed, 0.4),
        ("Seeking help when needed", profile.resilience.help_seeking_tendency, 0.3),
    ]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class EmotionalInsight:
    """A human-readable observation about a learner.

    Attributes:
        id: Unique insight id.
        learner_id: Learner the insight is about.
        insight_type: pattern, trigger, strength, growth_area or recommendation.
        title: Short title.
        description: One-sentence description.
        evidence: Facts supporting the insight.
        actionable_steps: Suggested next steps.
        confidence: Confidence in the insight (0-1).
        impact_level: Expected impact of acting on it.
        generated_at: When the insight was produced.
    """

    id: str
    learner_id: str
    insight_type: InsightType
    title: str
    description: str
    evidence: tuple[str, ...]
    actionable_steps: tuple[str, ...]
    confidence: float
    impact_level: ImpactLevel
    generated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "learner_id": self.learner_id,
            "insight_type": self.insight_type.value,
            "title": self.title,
            "description": self.description,
            "evidence": list(self.evidence),
            "actionable_steps": list(self.actionable_steps),
            "confidence": self.confidence,
            "impact_level": self.impact_level.value,
            "generated_at": format_iso(self.generated_at),
        }


class InsightGenerator:
    """Derives EmotionalInsight lists from history and profile."""

    def __init__(
        self,
        aggregator: ProfileAggregator | None = None,
        min_states: int = EmotionalThresholds.INSIGHT_MIN_STATES,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        """Initialize the generator.

        Args:
            aggregator: Builds a profile when none is passed to generate().
            min_states: History length below which no insights are produced.
            clock: Returns generated_at timestamps.
            id_factory: Returns insight ids.
        """
        self._aggregator = aggregator or ProfileAggregator()
        self._min_states = min_states
        self._clock = clock
        self._id_factory = id_factory

    def generate(
        self,
        learner_id: str,
        states: Sequence[EmotionalState],
        profile: EmotionalProfile | None = None,
    ) -> list[EmotionalInsight]:
        """Generate insights for a learner.

        Args:
            learner_id: Learner the history belongs to.
            states: Full history, oldest first.
            profile: Current profile; rebuilt from states when omitted.

        Returns:
            Insights in pattern, trigger, strength, growth_area order.
            Empty when the history is shorter than min_states.
        """
        if len(states) < self._min_states:
            return []

        if profile is None:
            profile = self._aggregator.build(learner_id, states)

        insights: list[EmotionalInsight] = []

        pattern = self._pattern_insight(learner_id, states)
        if pattern is not None:
            insights.append(pattern)

        trigger = self._trigger_insight(learner_id, states)
        if trigger is not None:
            insights.append(trigger)

        if profile is not None:
            insights.extend(self._strength_insights(learner_id, profile))
            growth = self._growth_area_insight(learner_id, profile)
            if growth is not None:
                insights.append(growth)

        return insights

    def _insight(self, learner_id: str, **fields: Any) -> EmotionalInsight:
        return EmotionalInsight(
            id=self._id_factory(),
            learner_id=learner_id,
            generated_at=self._clock(),
            **fields,
        )

    def _pattern_insight(
        self,
        learner_id: str,
        states: Sequence[EmotionalState],
    ) -> EmotionalInsight | None:
        recent = list(states[-EmotionalThresholds.INSIGHT_PATTERN_WINDOW:])
        counts = Counter(s.primary_emotion for s in recent)
        emotion, count = counts.most_common(1)[0]
        if count < EmotionalThresholds.INSIGHT_MIN_COUNT:
            return None

        percentage = _round_half_up(count / len(recent) * 100)
        if percentage > EmotionalThresholds.HIGH_IMPACT_PERCENT:
            impact = ImpactLevel.HIGH
        elif percentage > EmotionalThresholds.MEDIUM_IMPACT_PERCENT:
            impact = ImpactLevel.MEDIUM
        else:
            impact = ImpactLevel.LOW

        name = emotion.value
        return self._insight(
            learner_id,
            insight_type=InsightType.PATTERN,
            title=f"Emotional Pattern: {name.capitalize()}",
            description=(
                f"You've been experiencing {name} {percentage}% of the time "
                "in recent learning sessions."
            ),
            evidence=(f"{count} out of {len(recent)} recent emotional states were {name}",),
            actionable_steps=tuple(EMOTION_ACTION_STEPS.get(emotion, DEFAULT_ACTION_STEPS)),
            confidence=0.8,
            impact_level=impact,
        )

    def _trigger_insight(
        self,
        learner_id: str,
        states: Sequence[EmotionalState],
    ) -> EmotionalInsight | None:
        counts = Counter(t for s in states for t in s.triggers)
        if not counts:
            return None
        trigger, count = counts.most_common(1)[0]
        if count < EmotionalThresholds.INSIGHT_MIN_COUNT:
            return None

        return self._insight(
            learner_id,
            insight_type=InsightType.TRIGGER,
            title="Common Emotional Trigger Identified",
            description=(
                f'"{trigger}" appears to be a frequent trigger for your emotions during learning.'
            ),
            evidence=(f"This trigger appeared {count} times in your recent sessions",),
            actionable_steps=tuple(TRIGGER_ACTION_STEPS),
            confidence=0.7,
            impact_level=ImpactLevel.MEDIUM,
        )

    def _strength_insights(
        self,
        learner_id: str,
        profile: EmotionalProfile,
    ) -> list[EmotionalInsight]:
        insights = []
        for metric, label, value in _strength_metrics(profile):
            if value <= EmotionalThresholds.STRENGTH_THRESHOLD:
                continue
            insights.append(
                self._insight(
                    learner_id,
                    insight_type=InsightType.STRENGTH,
                    title=f"Your Emotional Strength: {label}",
                    description=(
                        f"You demonstrate {label.lower()} in your learning journey."
                    ),
                    evidence=(f"Demonstrated {label.lower()} ({metric} = {value:.2f})",),
                    actionable_steps=tuple(STRENGTH_ACTION_STEPS),
                    confidence=0.8,
                    impact_level=ImpactLevel.HIGH,
                )
            )
        return insights

    def _growth_area_insight(
        self,
        learner_id: str,
        profile: EmotionalProfile,
    ) -> EmotionalInsight | None:
        for label, value, threshold in _growth_metrics(profile):
            if value >= threshold:
                continue
            return self._insight(
                learner_id,
                insight_type=InsightType.GROWTH_AREA,
                title="Opportunity for Growth",
                description=(
                    f"Developing {label.lower()} could enhance your learning experience."
                ),
                evidence=(f"{label} shows room for improvement",),
                actionable_steps=tuple(GROWTH_AREA_STEPS.get(label, DEFAULT_GROWTH_STEPS)),
                confidence=0.6,
                impact_level=ImpactLevel.MEDIUM,
            )
        return None
