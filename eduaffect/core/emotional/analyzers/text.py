# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Text signal analyzer.

Adapter over an external text-emotion classifier. The classifier is any
object implementing TextEmotionClassifier; its raw output is validated
against TextEmotionPayload and clamped into legal ranges.

Classifier failures never reach the caller. A transport error, timeout,
malformed payload or out-of-set emotion all resolve to
TEXT_ANALYSIS_FALLBACK, a deliberately low-confidence neutral reading.
"""

import asyncio
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from eduaffect.core.emotional.constants import EmotionType
from eduaffect.core.emotional.context import LearningContext
from eduaffect.core.emotional.state import TextEstimate
from eduaffect.utils.logging import get_logger
from eduaffect.utils.ranges import clamp_signed, clamp_unit

logger = get_logger(__name__)

DEFAULT_TEXT_TIMEOUT = 10.0

TEXT_ANALYSIS_FALLBACK = TextEstimate(
    primary_emotion=EmotionType.CALM,
    intensity=0.3,
    valence=0.0,
    arousal=0.3,
    confidence=0.2,
    secondary_emotions=(),
    triggers=("text_analysis_failed",),
)


class TextEmotionClassifier(Protocol):
    """Contract of the external text-emotion classifier."""

    async def classify(self, text: str, context: LearningContext) -> Mapping[str, Any]:
        """Classify the emotions expressed in text.

        Returns:
            Mapping with primary_emotion, secondary_emotions, intensity,
            valence, arousal, confidence and triggers.
        """
        ...


class TextEmotionPayload(BaseModel):
    """Schema the classifier output must satisfy.

    Numeric fields are strict: numbers only, no numeric strings or booleans.
    """

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    primary_emotion: EmotionType
    secondary_emotions: list[EmotionType] = Field(default_factory=list, max_length=3)
    intensity: float = Field(strict=True)
    valence: float = Field(strict=True)
    arousal: float = Field(strict=True)
    confidence: float = Field(strict=True)
    triggers: list[str] = Field(default_factory=list)

    @field_validator("primary_emotion", mode="before")
    @classmethod
    def _normalize_primary(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("secondary_emotions", mode="before")
    @classmethod
    def _normalize_secondary(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [v.strip().lower() if isinstance(v, str) else v for v in value]
        return value


class TextSignalAnalyzer:
    """Validating, time-bounded wrapper around a TextEmotionClassifier.

    Attributes:
        timeout: Seconds to wait for the classifier.
    """

    def __init__(
        self,
        classifier: TextEmotionClassifier,
        timeout: float = DEFAULT_TEXT_TIMEOUT,
    ) -> None:
        """Initialize the analyzer.

        Args:
            classifier: External text-emotion classifier.
            timeout: Seconds to wait before falling back.
        """
        self._classifier = classifier
        self.timeout = timeout

    async def analyze(self, text: str, context: LearningContext) -> TextEstimate:
        """Classify text, falling back to a neutral reading on any failure.

        Args:
            text: Free text written by the learner.
            context: Activity context passed to the classifier.

        Returns:
            Clamped TextEstimate, or TEXT_ANALYSIS_FALLBACK.
        """
        try:
            raw = await asyncio.wait_for(
                self._classifier.classify(text, context),
                timeout=self.timeout,
            )
            payload = TextEmotionPayload.model_validate(raw)
        except asyncio.TimeoutError:
            logger.warning("text_analysis_timeout", timeout=self.timeout)
            return TEXT_ANALYSIS_FALLBACK
        except ValidationError as e:
            logger.warning("text_analysis_invalid_payload", errors=e.error_count())
            return TEXT_ANALYSIS_FALLBACK
        except Exception as e:
            logger.warning("text_analysis_failed", error=str(e), error_type=type(e).__name__)
            return TEXT_ANALYSIS_FALLBACK

        return TextEstimate(
            primary_emotion=payload.primary_emotion,
            secondary_emotions=tuple(payload.secondary_emotions),
            intensity=clamp_unit(payload.intensity),
            valence=clamp_signed(payload.valence),
            arousal=clamp_unit(payload.arousal),
            confidence=clamp_unit(payload.confidence),
            triggers=tuple(payload.triggers),
        )
