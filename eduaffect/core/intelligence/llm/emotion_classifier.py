# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM-backed text emotion classifier.

Implements the TextEmotionClassifier contract on top of LLMClient and
EmotionClassificationCapability. Errors propagate as LLMError or
CapabilityError; TextSignalAnalyzer turns them into its fallback.
"""

from collections.abc import Mapping
from typing import Any

from eduaffect.core.agents.capabilities import (
    CapabilityContext,
    EmotionClassificationCapability,
)
from eduaffect.core.emotional.context import LearningContext
from eduaffect.core.intelligence.llm.client import LLMClient
from eduaffect.utils.logging import get_logger

logger = get_logger(__name__)

CLASSIFIER_TEMPERATURE = 0.3
CLASSIFIER_MAX_TOKENS = 300


class LLMTextEmotionClassifier:
    """Classifies learner text with an LLM.

    Example:
        classifier = LLMTextEmotionClassifier(LLMClient())
        analyzer = TextSignalAnalyzer(classifier, timeout=10.0)
    """

    def __init__(
        self,
        llm_client: LLMClient,
        capability: EmotionClassificationCapability | None = None,
        temperature: float = CLASSIFIER_TEMPERATURE,
        max_tokens: int = CLASSIFIER_MAX_TOKENS,
    ) -> None:
        self._llm = llm_client
        self._capability = capability or EmotionClassificationCapability()
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def classify(self, text: str, context: LearningContext) -> Mapping[str, Any]:
        """Classify the emotions in text.

        Args:
            text: Learner text.
            context: Activity context included in the prompt.

        Returns:
            The JSON object reported by the LLM.

        Raises:
            LLMError: If the completion fails.
            CapabilityError: If the reply holds no JSON object.
        """
        messages = self._capability.build_prompt(
            {"text": text},
            CapabilityContext(learning=context),
        )
        response = await self._llm.complete_with_messages(
            messages,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        result = self._capability.parse_response(response.content)

        logger.debug(
            "text_emotion_classified",
            model=response.model,
            primary_emotion=result.analysis.get("primary_emotion"),
            tokens=response.total_tokens,
        )
        return result.analysis
