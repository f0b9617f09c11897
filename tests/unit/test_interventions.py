# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for intervention selection.

Tests cover:
- Single-state thresholds and priorities
- Pattern detection over the last three states
- Technique attachment and catalog coverage
"""

from datetime import datetime, timezone

import pytest

from eduaffect.core.emotional import (
    EmotionalIntervention,
    EmotionalTechnique,
    EmotionType,
    InterventionPriority,
    InterventionSelector,
    InterventionType,
    TechniqueCatalog,
    TechniqueCatalogError,
)

FIXED_TIME = datetime(2025, 3, 2, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def selector(catalog: TechniqueCatalog) -> InterventionSelector:
    """Create a selector over the packaged catalog."""
    ids = iter(f"intervention-{n}" for n in range(100))
    return InterventionSelector(catalog, clock=lambda: FIXED_TIME, id_factory=lambda: next(ids))


# =============================================================================
# Single-state path
# =============================================================================


@pytest.mark.unit
class TestSingleStateInterventions:
    """Tests for interventions triggered by one intense state."""

    def test_intensity_at_threshold_does_not_trigger(self, selector, make_state) -> None:
        state = make_state(EmotionType.FRUSTRATION, 0.70)

        assert selector.select(state, [state]) == []

    def test_intensity_just_above_threshold_triggers(self, selector, make_state) -> None:
        state = make_state(EmotionType.FRUSTRATION, 0.7000001)

        [intervention] = selector.select(state, [state])

        assert intervention.intervention_type == InterventionType.BREATHING_EXERCISE
        assert intervention.priority == InterventionPriority.MEDIUM
        assert intervention.emotion_triggers == (EmotionType.FRUSTRATION,)
        assert intervention.source_state_id == state.id
        assert intervention.created_at == FIXED_TIME
        assert intervention.title == "Take a Calming Breath"
        assert intervention.estimated_duration == 3

    def test_very_intense_frustration_is_high_priority(self, selector, make_state) -> None:
        state = make_state(EmotionType.FRUSTRATION, 0.85)

        [intervention] = selector.select(state, [state])

        assert intervention.priority == InterventionPriority.HIGH

    @pytest.mark.parametrize(
        ("emotion", "intensity", "expected_type", "expected_priority"),
        [
            (EmotionType.ANXIETY, 0.75, InterventionType.MINDFULNESS, InterventionPriority.HIGH),
            (EmotionType.OVERWHELM, 0.75, InterventionType.BREAK_SUGGESTION, InterventionPriority.HIGH),
            (EmotionType.DISAPPOINTMENT, 0.75, InterventionType.ENCOURAGEMENT, InterventionPriority.MEDIUM),
            (EmotionType.DISAPPOINTMENT, 0.9, InterventionType.ENCOURAGEMENT, InterventionPriority.HIGH),
        ],
    )
    def test_rule_table(
        self,
        selector,
        make_state,
        emotion: EmotionType,
        intensity: float,
        expected_type: InterventionType,
        expected_priority: InterventionPriority,
    ) -> None:
        state = make_state(emotion, intensity)

        [intervention] = selector.select(state, [state])

        assert intervention.intervention_type == expected_type
        assert intervention.priority == expected_priority

    def test_unmapped_emotion_never_triggers(self, selector, make_state) -> None:
        state = make_state(EmotionType.ANGER, 0.95)

        assert selector.select(state, [state]) == []

    def test_techniques_come_from_catalog(self, selector, make_state) -> None:
        state = make_state(EmotionType.FRUSTRATION, 0.9)

        [intervention] = selector.select(state, [state])

        assert [t.id for t in intervention.techniques] == ["box_breathing", "balloon_breathing"]


# =============================================================================
# Pattern path
# =============================================================================


@pytest.mark.unit
class TestPatternInterventions:
    """Tests for interventions triggered by recent negative patterns."""

    def test_two_of_last_three_negative_triggers_strategy_adjustment(self, selector, make_state) -> None:
        history = [
            make_state(EmotionType.ANXIETY, 0.4),
            make_state(EmotionType.CALM, 0.4),
            make_state(EmotionType.DISAPPOINTMENT, 0.4),
        ]

        [intervention] = selector.select(history[-1], history)

        assert intervention.intervention_type == InterventionType.STRATEGY_ADJUSTMENT
        assert intervention.priority == InterventionPriority.HIGH
        assert intervention.emotion_triggers == (EmotionType.ANXIETY, EmotionType.DISAPPOINTMENT)
        assert [t.id for t in intervention.techniques] == ["growth_mindset_reminder", "chunking_strategy"]

    def test_repeated_negative_emotion_is_listed_once(self, selector, make_state) -> None:
        history = [make_state(EmotionType.FRUSTRATION, 0.5) for _ in range(3)]

        [intervention] = selector.select(history[-1], history)

        assert intervention.emotion_triggers == (EmotionType.FRUSTRATION,)

    def test_one_of_last_three_negative_does_not_trigger(self, selector, make_state) -> None:
        history = [
            make_state(EmotionType.ANXIETY, 0.4),
            make_state(EmotionType.CALM, 0.4),
            make_state(EmotionType.FOCUS, 0.4),
        ]

        assert selector.select(history[-1], history) == []

    def test_no_negative_states_do_not_trigger(self, selector, make_state) -> None:
        history = [
            make_state(EmotionType.JOY, 0.6),
            make_state(EmotionType.CALM, 0.4),
            make_state(EmotionType.FOCUS, 0.8),
        ]

        assert selector.select(history[-1], history) == []

    def test_fewer_than_three_states_never_trigger_pattern(self, selector, make_state) -> None:
        history = [make_state(EmotionType.ANXIETY, 0.4), make_state(EmotionType.ANXIETY, 0.4)]

        assert selector.select(history[-1], history) == []

    def test_only_last_three_states_count(self, selector, make_state) -> None:
        history = [
            make_state(EmotionType.ANXIETY, 0.4),
            make_state(EmotionType.ANXIETY, 0.4),
            make_state(EmotionType.CALM, 0.4),
            make_state(EmotionType.FOCUS, 0.4),
            make_state(EmotionType.ANXIETY, 0.4),
        ]

        assert selector.select(history[-1], history) == []

    def test_both_paths_fire_single_state_first(self, selector, make_state) -> None:
        history = [
            make_state(EmotionType.OVERWHELM, 0.5),
            make_state(EmotionType.CALM, 0.5),
            make_state(EmotionType.FRUSTRATION, 0.9),
        ]

        interventions = selector.select(history[-1], history)

        assert [i.intervention_type for i in interventions] == [
            InterventionType.BREATHING_EXERCISE,
            InterventionType.STRATEGY_ADJUSTMENT,
        ]
        assert len({i.id for i in interventions}) == 2


# =============================================================================
# Catalog coverage and serialization
# =============================================================================


@pytest.mark.unit
class TestInterventionSelectorSetup:
    """Tests for selector construction and intervention records."""

    def test_catalog_missing_an_intervention_type_is_rejected(self) -> None:
        catalog = TechniqueCatalog([
            EmotionalTechnique(
                id="box_breathing",
                name="Box Breathing",
                description="Breathe in a square",
                instructions=("In 4", "Hold 4", "Out 4", "Hold 4"),
                duration=3,
                effectiveness_rating=0.85,
                intervention_types=(InterventionType.BREATHING_EXERCISE,),
            )
        ])

        with pytest.raises(TechniqueCatalogError, match="mindfulness"):
            InterventionSelector(catalog)

    def test_intervention_dict_round_trip(self, selector, make_state) -> None:
        state = make_state(EmotionType.ANXIETY, 0.9)
        [intervention] = selector.select(state, [state])

        restored = EmotionalIntervention.from_dict(intervention.to_dict())

        assert restored == intervention
