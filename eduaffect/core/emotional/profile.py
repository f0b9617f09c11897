# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Longitudinal emotional profile aggregation.

A profile is derived data: it is rebuilt from the most recent window of a
learner's state history on every assessment and may be discarded and
rebuilt at any time. Aggregation is a pure function of the window, so the
same history always produces the same scores.

Scores:
- Resilience: frustration tolerance, recovery speed, help seeking, persistence
- Emotional intelligence: self-awareness, self-regulation, motivation,
  empathy, social skills and their mean
- Learning preferences: difficulty progression, feedback style, social setting
"""

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from eduaffect.core.emotional.constants import (
    CHALLENGE_POSITIVE_EMOTIONS,
    DYSREGULATED_EMOTIONS,
    EASY_TASK_POSITIVE_EMOTIONS,
    HARD_TASK_POSITIVE_EMOTIONS,
    MOTIVATING_EMOTIONS,
    OPTIMAL_EMOTIONAL_STATES,
    RECOVERY_NEGATIVE_EMOTIONS,
    SOCIAL_CONTEXT_TO_SETTING,
    SOCIAL_POSITIVE_EMOTIONS,
    STRESS_EMOTIONS,
    DifficultyProgression,
    EmotionalThresholds,
    EmotionType,
    FeedbackStyle,
    SocialContext,
    SocialSetting,
)
from eduaffect.core.emotional.state import EmotionalState
from eduaffect.utils.datetime import format_iso, minutes_between, parse_iso, utc_now
from eduaffect.utils.ranges import clamp_unit, mean


@dataclass(frozen=True)
class LearningPreferences:
    """Inferred learning preferences."""

    difficulty_progression: DifficultyProgression
    feedback_style: FeedbackStyle
    social_setting: SocialSetting


@dataclass(frozen=True)
class ResilienceIndicators:
    """Resilience scores, each in [0, 1]."""

    frustration_tolerance: float
    recovery_speed: float
    help_seeking_tendency: float
    persistence_level: float


@dataclass(frozen=True)
class EQScores:
    """Emotional intelligence scores, each in [0, 1]."""

    self_awareness: float
    self_regulation: float
    motivation: float
    empathy: float
    social_skills: float
    overall_eq: float


@dataclass(frozen=True)
class EmotionalProfile:
    """Rolling emotional profile of one learner.

    Attributes:
        learner_id: Learner the profile describes.
        frequent_emotions: Top primary emotions by count.
        stress_triggers: Triggers seen in stress states.
        motivation_drivers: Top triggers seen in motivating states.
        optimal_emotional_states: Emotions learning works best in.
        learning_preferences: Inferred preferences.
        resilience: Resilience indicators.
        eq_scores: Emotional intelligence scores.
        window_size: Number of states the profile was built from.
        last_updated: When the profile was built.
    """

    learner_id: str
    frequent_emotions: tuple[EmotionType, ...]
    stress_triggers: tuple[str, ...]
    motivation_drivers: tuple[str, ...]
    optimal_emotional_states: tuple[EmotionType, ...]
    learning_preferences: LearningPreferences
    resilience: ResilienceIndicators
    eq_scores: EQScores
    window_size: int
    last_updated: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        prefs = self.learning_preferences
        return {
            "learner_id": self.learner_id,
            "frequent_emotions": [e.value for e in self.frequent_emotions],
            "stress_triggers": list(self.stress_triggers),
            "motivation_drivers": list(self.motivation_drivers),
            "optimal_emotional_states": [e.value for e in self.optimal_emotional_states],
            "learning_preferences": {
                "difficulty_progression": prefs.difficulty_progression.value,
                "feedback_style": prefs.feedback_style.value,
                "social_setting": prefs.social_setting.value,
            },
            "resilience": {
                "frustration_tolerance": self.resilience.frustration_tolerance,
                "recovery_speed": self.resilience.recovery_speed,
                "help_seeking_tendency": self.resilience.help_seeking_tendency,
                "persistence_level": self.resilience.persistence_level,
            },
            "eq_scores": {
                "self_awareness": self.eq_scores.self_awareness,
                "self_regulation": self.eq_scores.self_regulation,
                "motivation": self.eq_scores.motivation,
                "empathy": self.eq_scores.empathy,
                "social_skills": self.eq_scores.social_skills,
                "overall_eq": self.eq_scores.overall_eq,
            },
            "window_size": self.window_size,
            "last_updated": format_iso(self.last_updated),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmotionalProfile":
        """Rebuild a profile from to_dict() output."""
        prefs = data["learning_preferences"]
        return cls(
            learner_id=data["learner_id"],
            frequent_emotions=tuple(EmotionType(e) for e in data["frequent_emotions"]),
            stress_triggers=tuple(data["stress_triggers"]),
            motivation_drivers=tuple(data["motivation_drivers"]),
            optimal_emotional_states=tuple(
                EmotionType(e) for e in data["optimal_emotional_states"]
            ),
            learning_preferences=LearningPreferences(
                difficulty_progression=DifficultyProgression(prefs["difficulty_progression"]),
                feedback_style=FeedbackStyle(prefs["feedback_style"]),
                social_setting=SocialSetting(prefs["social_setting"]),
            ),
            resilience=ResilienceIndicators(**data["resilience"]),
            eq_scores=EQScores(**data["eq_scores"]),
            window_size=int(data["window_size"]),
            last_updated=parse_iso(data["last_updated"]),
        )


def _share(states: Sequence[EmotionalState], emotions: frozenset[EmotionType]) -> float:
    """Fraction of states whose primary emotion is in emotions (0 if empty)."""
    if not states:
        return 0.0
    return sum(1 for s in states if s.primary_emotion in emotions) / len(states)


def _mean_intensity_complement(
    states: Sequence[EmotionalState],
    emotions: frozenset[EmotionType],
) -> float:
    """1 - mean intensity of states in emotions; 1.0 when there are none."""
    intensities = [s.intensity for s in states if s.primary_emotion in emotions]
    return clamp_unit(1.0 - mean(intensities))


class ProfileAggregator:
    """Builds EmotionalProfile instances from state history.

    Attributes:
        window: Number of most recent states considered.
    """

    def __init__(
        self,
        window: int = EmotionalThresholds.PROFILE_WINDOW,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.window = window
        self._clock = clock

    def build(
        self,
        learner_id: str,
        states: Sequence[EmotionalState],
    ) -> EmotionalProfile | None:
        """Build a profile from a learner's history.

        Args:
            learner_id: Learner the history belongs to.
            states: Full or partial history, oldest first.

        Returns:
            EmotionalProfile, or None when the history is empty.
        """
        if not states:
            return None

        recent = list(states[-self.window:])

        return EmotionalProfile(
            learner_id=learner_id,
            frequent_emotions=self._frequent_emotions(recent),
            stress_triggers=self._stress_triggers(recent),
            motivation_drivers=self._motivation_drivers(recent),
            optimal_emotional_states=OPTIMAL_EMOTIONAL_STATES,
            learning_preferences=LearningPreferences(
                difficulty_progression=self._difficulty_progression(recent),
                feedback_style=self._feedback_style(recent),
                social_setting=self._social_setting(recent),
            ),
            resilience=ResilienceIndicators(
                frustration_tolerance=_mean_intensity_complement(
                    recent, frozenset({EmotionType.FRUSTRATION})
                ),
                recovery_speed=self._recovery_speed(recent),
                help_seeking_tendency=self._help_seeking_tendency(recent),
                persistence_level=self._persistence_level(recent),
            ),
            eq_scores=self._eq_scores(recent),
            window_size=len(recent),
            last_updated=self._clock(),
        )

    # ========== Emotional patterns ==========

    def _frequent_emotions(self, states: list[EmotionalState]) -> tuple[EmotionType, ...]:
        counts = Counter(s.primary_emotion for s in states)
        return tuple(emotion for emotion, _ in counts.most_common(EmotionalThresholds.TOP_N))

    def _stress_triggers(self, states: list[EmotionalState]) -> tuple[str, ...]:
        triggers = [
            t for s in states if s.primary_emotion in STRESS_EMOTIONS for t in s.triggers
        ]
        return tuple(dict.fromkeys(triggers))

    def _motivation_drivers(self, states: list[EmotionalState]) -> tuple[str, ...]:
        counts = Counter(
            t for s in states if s.primary_emotion in MOTIVATING_EMOTIONS for t in s.triggers
        )
        return tuple(trigger for trigger, _ in counts.most_common(EmotionalThresholds.TOP_N))

    # ========== Resilience ==========

    def _recovery_speed(self, states: list[EmotionalState]) -> float:
        """Score how quickly negative states give way to non-negative ones.

        For every negative state the first later non-negative state counts
        as its recovery. One hour or more of average recovery scores 0.
        """
        recovery_minutes: list[float] = []
        for i, state in enumerate(states):
            if state.primary_emotion not in RECOVERY_NEGATIVE_EMOTIONS:
                continue
            for later in states[i + 1:]:
                if later.primary_emotion not in RECOVERY_NEGATIVE_EMOTIONS:
                    recovery_minutes.append(minutes_between(state.timestamp, later.timestamp))
                    break

        avg_minutes = mean(recovery_minutes, default=EmotionalThresholds.DEFAULT_RECOVERY_MINUTES)
        return clamp_unit(1.0 - avg_minutes / EmotionalThresholds.RECOVERY_HORIZON_MINUTES)

    def _help_seeking_tendency(self, states: list[EmotionalState]) -> float:
        seeking = sum(
            1 for s in states
            if any("help" in t or "seeking" in t for t in s.triggers)
        )
        return clamp_unit(min(1.0, seeking / len(states) * 2))

    def _persistence_level(self, states: list[EmotionalState]) -> float:
        persistent = sum(
            1 for s in states
            if s.primary_emotion == EmotionType.DETERMINATION
            or any("many_attempts" in t or "persistence" in t for t in s.triggers)
        )
        return clamp_unit(min(1.0, persistent / len(states) * 3))

    # ========== Emotional intelligence ==========

    def _eq_scores(self, states: list[EmotionalState]) -> EQScores:
        variety = len({s.primary_emotion for s in states})
        avg_confidence = mean([s.confidence for s in states])
        self_awareness = clamp_unit(min(1.0, (variety / 10) * 0.6 + avg_confidence * 0.4))

        self_regulation = _mean_intensity_complement(states, DYSREGULATED_EMOTIONS)

        challenging = [
            s for s in states
            if s.context.difficulty_level > EmotionalThresholds.CHALLENGING_DIFFICULTY
        ]
        motivation = (
            clamp_unit(_share(challenging, CHALLENGE_POSITIVE_EMOTIONS)) if challenging else 0.5
        )

        social = [s for s in states if s.context.social_context != SocialContext.INDIVIDUAL]
        empathy = clamp_unit(_share(social, SOCIAL_POSITIVE_EMOTIONS)) if social else 0.5
        social_skills = empathy

        overall_eq = clamp_unit(
            (self_awareness + self_regulation + motivation + empathy + social_skills) / 5
        )

        return EQScores(
            self_awareness=self_awareness,
            self_regulation=self_regulation,
            motivation=motivation,
            empathy=empathy,
            social_skills=social_skills,
            overall_eq=overall_eq,
        )

    # ========== Learning preferences ==========

    def _difficulty_progression(self, states: list[EmotionalState]) -> DifficultyProgression:
        hard = [
            s for s in states
            if s.context.difficulty_level > EmotionalThresholds.HARD_TASK_DIFFICULTY
        ]
        easy = [
            s for s in states
            if s.context.difficulty_level < EmotionalThresholds.EASY_TASK_DIFFICULTY
        ]
        if _share(hard, HARD_TASK_POSITIVE_EMOTIONS) > EmotionalThresholds.CHALLENGING_SHARE:
            return DifficultyProgression.CHALLENGING
        if _share(easy, EASY_TASK_POSITIVE_EMOTIONS) > EmotionalThresholds.GRADUAL_SHARE:
            return DifficultyProgression.GRADUAL
        return DifficultyProgression.ADAPTIVE

    def _feedback_style(self, states: list[EmotionalState]) -> FeedbackStyle:
        anxiety_share = _share(states, frozenset({EmotionType.ANXIETY}))
        if anxiety_share > EmotionalThresholds.ANXIETY_SHARE:
            return FeedbackStyle.IMMEDIATE
        return FeedbackStyle.COMPREHENSIVE

    def _social_setting(self, states: list[EmotionalState]) -> SocialSetting:
        counts = Counter(s.context.social_context for s in states)
        most_common, _ = counts.most_common(1)[0]
        return SOCIAL_CONTEXT_TO_SETTING[most_common]
