# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention selection rules.

Two independent paths run on every new state:

- Single-state: a state whose intensity is strictly above 0.7 and whose
  primary emotion appears in SINGLE_STATE_RULES yields that rule's
  intervention. Intensity above 0.8 raises the priority to high.
- Pattern: when at least 2 of the last 3 states carry a negative pattern
  emotion, a high priority strategy_adjustment is emitted.

Both rule sets are plain data so they can be inspected and tested
without running the selector.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import uuid4

from eduaffect.core.emotional.catalog import EmotionalTechnique, TechniqueCatalog
from eduaffect.core.emotional.constants import (
    NEGATIVE_PATTERN_EMOTIONS,
    EmotionalThresholds,
    EmotionType,
    InterventionPriority,
    InterventionType,
)
from eduaffect.core.emotional.state import EmotionalState
from eduaffect.utils.datetime import format_iso, parse_iso, utc_now


@dataclass(frozen=True)
class InterventionTemplate:
    """Static content of an intervention type."""

    title: str
    description: str
    expected_outcome: str
    estimated_duration: int
    success_criteria: tuple[str, ...]
    follow_up_actions: tuple[str, ...]


@dataclass(frozen=True)
class SingleStateRule:
    """Intervention fired by a single intense state."""

    intervention_type: InterventionType
    default_priority: InterventionPriority


INTERVENTION_PLAYBOOK: dict[InterventionType, InterventionTemplate] = {
    InterventionType.BREATHING_EXERCISE: InterventionTemplate(
        title="Take a Calming Breath",
        description="A quick breathing exercise to help you feel more centered and focused",
        expected_outcome="Reduced frustration and increased calm",
        estimated_duration=3,
        success_criteria=("Feeling more calm", "Ready to continue learning"),
        follow_up_actions=("Return to learning task", "Consider adjusting difficulty if needed"),
    ),
    InterventionType.MINDFULNESS: InterventionTemplate(
        title="Mindful Moment",
        description="A brief mindfulness exercise to reduce anxiety and improve focus",
        expected_outcome="Reduced anxiety and increased mental clarity",
        estimated_duration=2,
        success_criteria=("Feeling less anxious", "Mind feels clearer"),
        follow_up_actions=("Start with easier content", "Break tasks into smaller steps"),
    ),
    InterventionType.BREAK_SUGGESTION: InterventionTemplate(
        title="Time for a Break",
        description="You've been working hard! Taking a break can help reset your mind",
        expected_outcome="Refreshed mind and reduced overwhelm",
        estimated_duration=10,
        success_criteria=("Feeling refreshed", "Ready to tackle challenges again"),
        follow_up_actions=("Review learning goals", "Start with a confidence-building activity"),
    ),
    InterventionType.ENCOURAGEMENT: InterventionTemplate(
        title="Growth Mindset Boost",
        description="Remember that challenges are opportunities to grow your brain!",
        expected_outcome="Renewed motivation and positive outlook",
        estimated_duration=3,
        success_criteria=("Feeling more optimistic", "Ready to try again"),
        follow_up_actions=("Review recent successes", "Set smaller, achievable goals"),
    ),
    InterventionType.STRATEGY_ADJUSTMENT: InterventionTemplate(
        title="Let's Try a Different Approach",
        description=(
            "I notice you've been struggling. "
            "Let's adjust our learning strategy to better support you."
        ),
        expected_outcome="More effective learning approach and improved emotional state",
        estimated_duration=5,
        success_criteria=("Strategy feels more manageable", "Feeling more confident"),
        follow_up_actions=("Implement new learning strategy", "Monitor emotional state closely"),
    ),
}

SINGLE_STATE_RULES: dict[EmotionType, SingleStateRule] = {
    EmotionType.FRUSTRATION: SingleStateRule(
        InterventionType.BREATHING_EXERCISE, InterventionPriority.MEDIUM
    ),
    EmotionType.ANXIETY: SingleStateRule(
        InterventionType.MINDFULNESS, InterventionPriority.HIGH
    ),
    EmotionType.OVERWHELM: SingleStateRule(
        InterventionType.BREAK_SUGGESTION, InterventionPriority.HIGH
    ),
    EmotionType.DISAPPOINTMENT: SingleStateRule(
        InterventionType.ENCOURAGEMENT, InterventionPriority.MEDIUM
    ),
}

PATTERN_INTERVENTION_TYPE = InterventionType.STRATEGY_ADJUSTMENT


@dataclass(frozen=True)
class EmotionalIntervention:
    """A suggested corrective action queued for a learner.

    Attributes:
        id: Unique intervention id.
        emotion_triggers: Emotions that caused the intervention.
        intervention_type: Kind of intervention.
        priority: Urgency.
        title: Short learner-facing title.
        description: Learner-facing description.
        techniques: Catalog techniques to offer.
        expected_outcome: What the intervention should achieve.
        estimated_duration: Minutes the intervention takes.
        success_criteria: How to tell it worked.
        follow_up_actions: What to do afterwards.
        source_state_id: State that triggered the intervention.
        created_at: When the intervention was created.
    """

    id: str
    emotion_triggers: tuple[EmotionType, ...]
    intervention_type: InterventionType
    priority: InterventionPriority
    title: str
    description: str
    techniques: tuple[EmotionalTechnique, ...]
    expected_outcome: str
    estimated_duration: int
    success_criteria: tuple[str, ...]
    follow_up_actions: tuple[str, ...]
    source_state_id: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "emotion_triggers": [e.value for e in self.emotion_triggers],
            "intervention_type": self.intervention_type.value,
            "priority": self.priority.value,
            "title": self.title,
            "description": self.description,
            "techniques": [t.model_dump(mode="json") for t in self.techniques],
            "expected_outcome": self.expected_outcome,
            "estimated_duration": self.estimated_duration,
            "success_criteria": list(self.success_criteria),
            "follow_up_actions": list(self.follow_up_actions),
            "source_state_id": self.source_state_id,
            "created_at": format_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmotionalIntervention":
        """Rebuild an intervention from to_dict() output."""
        return cls(
            id=data["id"],
            emotion_triggers=tuple(EmotionType(e) for e in data["emotion_triggers"]),
            intervention_type=InterventionType(data["intervention_type"]),
            priority=InterventionPriority(data["priority"]),
            title=data["title"],
            description=data["description"],
            techniques=tuple(EmotionalTechnique.model_validate(t) for t in data["techniques"]),
            expected_outcome=data["expected_outcome"],
            estimated_duration=int(data["estimated_duration"]),
            success_criteria=tuple(data["success_criteria"]),
            follow_up_actions=tuple(data["follow_up_actions"]),
            source_state_id=data["source_state_id"],
            created_at=parse_iso(data["created_at"]),
        )


class InterventionSelector:
    """Rule engine mapping new states onto interventions."""

    def __init__(
        self,
        catalog: TechniqueCatalog,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        """Initialize the selector.

        Args:
            catalog: Technique catalog interventions draw from.
            clock: Returns the creation time of new interventions.
            id_factory: Returns ids for new interventions.

        Raises:
            TechniqueCatalogError: If an emitted intervention type has no technique.
        """
        emitted = [rule.intervention_type for rule in SINGLE_STATE_RULES.values()]
        emitted.append(PATTERN_INTERVENTION_TYPE)
        catalog.ensure_covers(emitted)

        self._catalog = catalog
        self._clock = clock
        self._id_factory = id_factory

    def select(
        self,
        state: EmotionalState,
        recent_states: Sequence[EmotionalState],
    ) -> list[EmotionalIntervention]:
        """Evaluate both rule paths for a new state.

        Args:
            state: The newly appended state.
            recent_states: History tail ending with state, oldest first.

        Returns:
            Interventions to enqueue, single-state first. May be empty.
        """
        interventions: list[EmotionalIntervention] = []

        single = self._single_state(state)
        if single is not None:
            interventions.append(single)

        pattern = self._pattern(state, recent_states)
        if pattern is not None:
            interventions.append(pattern)

        return interventions

    def _single_state(self, state: EmotionalState) -> EmotionalIntervention | None:
        if state.intensity <= EmotionalThresholds.SINGLE_STATE_INTENSITY:
            return None
        rule = SINGLE_STATE_RULES.get(state.primary_emotion)
        if rule is None:
            return None

        priority = rule.default_priority
        if state.intensity > EmotionalThresholds.HIGH_PRIORITY_INTENSITY:
            priority = InterventionPriority.HIGH

        return self._build(rule.intervention_type, priority, (state.primary_emotion,), state)

    def _pattern(
        self,
        state: EmotionalState,
        recent_states: Sequence[EmotionalState],
    ) -> EmotionalIntervention | None:
        window = list(recent_states[-EmotionalThresholds.PATTERN_WINDOW:])
        if len(window) < EmotionalThresholds.PATTERN_WINDOW:
            return None

        negatives = [
            s.primary_emotion for s in window if s.primary_emotion in NEGATIVE_PATTERN_EMOTIONS
        ]
        if len(negatives) < EmotionalThresholds.PATTERN_MIN_NEGATIVE:
            return None

        return self._build(
            PATTERN_INTERVENTION_TYPE,
            InterventionPriority.HIGH,
            tuple(dict.fromkeys(negatives)),
            state,
        )

    def _build(
        self,
        intervention_type: InterventionType,
        priority: InterventionPriority,
        emotion_triggers: tuple[EmotionType, ...],
        state: EmotionalState,
    ) -> EmotionalIntervention:
        template = INTERVENTION_PLAYBOOK[intervention_type]
        return EmotionalIntervention(
            id=self._id_factory(),
            emotion_triggers=emotion_triggers,
            intervention_type=intervention_type,
            priority=priority,
            title=template.title,
            description=template.description,
            techniques=tuple(self._catalog.for_intervention(intervention_type)),
            expected_outcome=template.expected_outcome,
            estimated_duration=template.estimated_duration,
            success_criteria=template.success_criteria,
            follow_up_actions=template.follow_up_actions,
            source_state_id=state.id,
            created_at=self._clock(),
        )
