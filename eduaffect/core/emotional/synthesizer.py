# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Weighted fusion of signal estimates into one EmotionalState.

Weights are additive caps (text 0.40, behavior 0.35, performance 0.25),
not a distribution: an absent signal contributes nothing and the rest are
not renormalized.

The running estimate starts at a calm baseline (intensity 0.5, valence 0,
arousal 0.5, confidence 0.5) which a text estimate replaces with its own
weighted values.

Primacy contest: behaviour displaces the running primary when its
un-weighted intensity exceeds the running intensity divided by the text
weight. Without text the baseline scales to 1.25, so behaviour alone
never displaces calm and is kept as a secondary emotion. Performance
never contests primacy and only ever adds a secondary emotion.
"""

from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from eduaffect.core.emotional.constants import EmotionType, FusionBaseline, SignalWeights
from eduaffect.core.emotional.context import LearningContext
from eduaffect.core.emotional.state import EmotionalState, SignalReadings
from eduaffect.utils.datetime import utc_now
from eduaffect.utils.ranges import clamp_signed, clamp_unit

MAX_SECONDARY_EMOTIONS = 3


def _new_state_id() -> str:
    return str(uuid4())


def _unique(items: list) -> list:
    """Drop duplicates keeping first-seen order."""
    return list(dict.fromkeys(items))


class SignalSynthesizer:
    """Combines optional text, behaviour and performance estimates.

    The output is deterministic for the same readings; only the id and
    timestamp vary, and both come from injectable factories.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_state_id,
    ) -> None:
        """Initialize the synthesizer.

        Args:
            clock: Returns the timestamp for new states.
            id_factory: Returns the id for new states.
        """
        self._clock = clock
        self._id_factory = id_factory

    def synthesize(
        self,
        readings: SignalReadings,
        learner_id: str,
        session_id: str,
        context: LearningContext,
    ) -> EmotionalState:
        """Fuse the available readings into a new EmotionalState.

        Args:
            readings: Analyzer outputs; any may be None.
            learner_id: Learner the state belongs to.
            session_id: Session the state was observed in.
            context: Activity context of the assessment.

        Returns:
            New immutable EmotionalState with bounded fields.
        """
        primary = EmotionType.CALM
        intensity = FusionBaseline.INTENSITY
        valence = FusionBaseline.VALENCE
        arousal = FusionBaseline.AROUSAL
        confidence = FusionBaseline.CONFIDENCE
        secondary: list[EmotionType] = []
        triggers: list[str] = []

        text = readings.text
        if text is not None:
            primary = text.primary_emotion
            intensity = text.intensity * SignalWeights.TEXT
            valence = text.valence * SignalWeights.TEXT
            arousal = text.arousal * SignalWeights.TEXT
            confidence = text.confidence * SignalWeights.TEXT
            secondary.extend(text.secondary_emotions)
            triggers.extend(text.triggers)

        behavior = readings.behavior
        if behavior is not None:
            if behavior.primary_emotion != primary:
                if behavior.intensity > intensity / SignalWeights.TEXT:
                    secondary.append(primary)
                    primary = behavior.primary_emotion
                else:
                    secondary.append(behavior.primary_emotion)
            intensity += behavior.intensity * SignalWeights.BEHAVIOR
            confidence += behavior.confidence * SignalWeights.BEHAVIOR
            triggers.extend(behavior.triggers)

        performance = readings.performance
        if performance is not None:
            if performance.primary_emotion != primary:
                secondary.append(performance.primary_emotion)
            intensity += performance.intensity * SignalWeights.PERFORMANCE
            triggers.extend(performance.triggers)

        secondary = [e for e in _unique(secondary) if e != primary][:MAX_SECONDARY_EMOTIONS]

        return EmotionalState(
            id=self._id_factory(),
            timestamp=self._clock(),
            learner_id=learner_id,
            session_id=session_id,
            primary_emotion=primary,
            secondary_emotions=tuple(secondary),
            intensity=clamp_unit(intensity),
            valence=clamp_signed(valence),
            arousal=clamp_unit(arousal),
            confidence=clamp_unit(confidence),
            triggers=tuple(_unique(triggers)),
            context=context,
        )
