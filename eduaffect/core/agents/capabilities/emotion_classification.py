# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Emotion classification capability for learner free text.

This capability asks the LLM to read a learner's message in its learning
context and report the emotions it expresses as a JSON object:
primary_emotion, secondary_emotions, intensity, valence, arousal,
confidence and triggers.

Parsing only extracts the JSON object. Schema and range checks are the
responsibility of TextSignalAnalyzer, which turns anything unusable into
its fallback reading.

Usage:
    capability = EmotionClassificationCapability()
    messages = capability.build_prompt(
        {"text": "Ugh, I keep getting these wrong"},
        CapabilityContext(learning=learning_context),
    )
    # Caller sends messages to LLM
    result = capability.parse_response(llm_response)
    # result.analysis["primary_emotion"] == "frustration"
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from eduaffect.core.agents.capabilities.base import (
    Capability,
    CapabilityContext,
    CapabilityError,
    CapabilityResult,
)
from eduaffect.core.emotional.constants import EmotionType


class EmotionClassificationParams(BaseModel):
    """Parameters for emotion classification.

    Attributes:
        text: Learner text to classify.
    """

    text: str = Field(
        description="Learner text to classify",
        min_length=1,
    )


class EmotionClassificationResult(CapabilityResult):
    """Result of emotion classification.

    Attributes:
        analysis: JSON object reported by the LLM, unvalidated.
    """

    analysis: dict[str, Any] = Field(
        default_factory=dict,
        description="Emotion analysis reported by the LLM",
    )


class EmotionClassificationCapability(Capability):
    """Capability for classifying emotions in learner text.

    Example:
        capability = EmotionClassificationCapability()
        messages = capability.build_prompt({"text": text}, context)
        result = capability.parse_response(llm_response)
    """

    @property
    def name(self) -> str:
        """Return capability name."""
        return "emotion_classification"

    @property
    def description(self) -> str:
        """Return capability description."""
        return "Classifies the emotions a learner expresses in free text"

    def validate_params(self, params: dict[str, Any]) -> None:
        """Validate classification parameters.

        Raises:
            CapabilityError: If parameters are invalid.
        """
        try:
            EmotionClassificationParams(**params)
        except ValidationError as e:
            raise CapabilityError(
                message=f"Invalid parameters: {e}",
                capability_name=self.name,
                original_error=e,
            ) from e

    def build_prompt(
        self,
        params: dict[str, Any],
        context: CapabilityContext,
    ) -> list[dict[str, str]]:
        """Build prompt for emotion classification.

        Args:
            params: Classification parameters including the text.
            context: Learning context of the learner.

        Returns:
            List of messages for LLM.
        """
        self.validate_params(params)
        p = EmotionClassificationParams(**params)

        system_message = (
            "You are an expert educational psychologist. "
            "Analyze the emotional content of learner messages written during learning activities. "
            "Respond only with a JSON object."
        )

        user_parts = [
            "Analyze the emotional content of this text from a learning context.",
            f'\nText: "{p.text}"',
        ]

        learning_context = context.get_learning_context()
        if learning_context:
            user_parts.append(f"\n{learning_context}")

        user_parts.append(self._get_output_format_instruction())

        return [
            {"role": "system", "content": system_message},
            {"role": "user", "content": "\n".join(user_parts)},
        ]

    def _get_output_format_instruction(self) -> str:
        """Get the JSON output format instruction."""
        emotions = ", ".join(e.value for e in EmotionType)
        return f"""
Provide a JSON analysis in this exact format:
```json
{{
  "primary_emotion": "frustration",
  "secondary_emotions": ["confusion", "determination"],
  "intensity": 0.7,
  "valence": -0.5,
  "arousal": 0.6,
  "confidence": 0.8,
  "triggers": ["repeated mistakes", "negative self-talk"]
}}
```

Rules:
- primary_emotion must be one of: {emotions}
- secondary_emotions: up to 3 emotions from the same list
- intensity: 0-1, how strong the emotion is
- valence: -1 to 1, how positive or negative
- arousal: 0-1, how calm or excited
- confidence: 0-1, confidence in this assessment
- triggers: what in the text or context suggests these emotions

Consider:
- Language tone and word choice
- Learning-specific emotions (academic frustration, curiosity, etc.)
- Context-appropriate emotional responses
- Age-appropriate emotional expression
"""

    def parse_response(self, response: str) -> EmotionClassificationResult:
        """Parse LLM response into EmotionClassificationResult.

        Args:
            response: Raw LLM response text.

        Returns:
            EmotionClassificationResult carrying the JSON object.

        Raises:
            CapabilityError: If no JSON object can be extracted.
        """
        data = self._extract_json_from_response(response)
        return EmotionClassificationResult(
            success=True,
            capability_name=self.name,
            raw_response=response,
            analysis=data,
        )
