# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Emotional state and per-signal estimate data structures.

EmotionalState is the canonical, immutable record produced by one
assessment. The *Estimate classes are the candidate readings produced by
the individual signal analyzers before fusion, and SignalReadings bundles
whichever of them were available for a given assessment.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from eduaffect.core.emotional.constants import EmotionType
from eduaffect.core.emotional.context import LearningContext
from eduaffect.utils.datetime import format_iso, parse_iso


@dataclass(frozen=True)
class BehavioralEstimate:
    """Candidate reading from behavioural telemetry.

    Attributes:
        primary_emotion: Emotion implied by the behaviour.
        intensity: Strength of the emotion (0-1).
        confidence: Reliability of the reading (0-1).
        triggers: Names of the rules that fired.
    """

    primary_emotion: EmotionType
    intensity: float
    confidence: float
    triggers: tuple[str, ...] = ()


@dataclass(frozen=True)
class PerformanceEstimate:
    """Candidate reading from score and attempt telemetry.

    Attributes:
        primary_emotion: Emotion implied by the performance.
        intensity: Strength of the emotion (0-1).
        triggers: Names of the rules that fired.
    """

    primary_emotion: EmotionType
    intensity: float
    triggers: tuple[str, ...] = ()


@dataclass(frozen=True)
class TextEstimate:
    """Candidate reading from the text-emotion classifier.

    Attributes:
        primary_emotion: Most prominent emotion in the text.
        secondary_emotions: Up to three further emotions.
        intensity: Strength of the emotion (0-1).
        valence: Negative (-1) to positive (+1).
        arousal: Calm (0) to activated (1).
        confidence: Classifier confidence (0-1).
        triggers: Cues in the text that suggest the emotions.
    """

    primary_emotion: EmotionType
    intensity: float
    valence: float
    arousal: float
    confidence: float
    secondary_emotions: tuple[EmotionType, ...] = ()
    triggers: tuple[str, ...] = ()


@dataclass(frozen=True)
class SignalReadings:
    """The analyzer outputs available for one assessment.

    A missing signal is None and contributes nothing to fusion.
    """

    text: TextEstimate | None = None
    behavior: BehavioralEstimate | None = None
    performance: PerformanceEstimate | None = None


@dataclass(frozen=True)
class EmotionalState:
    """A learner's fused emotional state at one point in time.

    Attributes:
        id: Unique state identifier.
        timestamp: When the state was produced (UTC).
        learner_id: Learner the state belongs to.
        session_id: Session the state was observed in.
        primary_emotion: Dominant emotion.
        secondary_emotions: Up to three other emotions, never the primary.
        intensity: Strength of the primary emotion (0-1).
        valence: Negative (-1) to positive (+1).
        arousal: Calm (0) to activated (1).
        confidence: Confidence in the assessment (0-1).
        triggers: Unique trigger tags in first-seen order.
        context: Activity context of the assessment.
    """

    id: str
    timestamp: datetime
    learner_id: str
    session_id: str
    primary_emotion: EmotionType
    intensity: float
    valence: float
    arousal: float
    confidence: float
    context: LearningContext
    secondary_emotions: tuple[EmotionType, ...] = field(default=())
    triggers: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "timestamp": format_iso(self.timestamp),
            "learner_id": self.learner_id,
            "session_id": self.session_id,
            "primary_emotion": self.primary_emotion.value,
            "secondary_emotions": [e.value for e in self.secondary_emotions],
            "intensity": self.intensity,
            "valence": self.valence,
            "arousal": self.arousal,
            "confidence": self.confidence,
            "triggers": list(self.triggers),
            "context": self.context.model_dump(mode="json"),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmotionalState":
        """Rebuild a state from to_dict() output."""
        return cls(
            id=data["id"],
            timestamp=parse_iso(data["timestamp"]),
            learner_id=data["learner_id"],
            session_id=data["session_id"],
            primary_emotion=EmotionType(data["primary_emotion"]),
            secondary_emotions=tuple(EmotionType(e) for e in data.get("secondary_emotions", [])),
            intensity=float(data["intensity"]),
            valence=float(data["valence"]),
            arousal=float(data["arousal"]),
            confidence=float(data["confidence"]),
            triggers=tuple(data.get("triggers", [])),
            context=LearningContext.model_validate(data["context"]),
        )
