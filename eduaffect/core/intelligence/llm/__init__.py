# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM integration via LiteLLM.

Example:
    from eduaffect.core.intelligence.llm import LLMClient, LLMTextEmotionClassifier

    classifier = LLMTextEmotionClassifier(LLMClient())
"""

from eduaffect.core.intelligence.llm.client import LLMClient, LLMError, LLMResponse
from eduaffect.core.intelligence.llm.emotion_classifier import LLMTextEmotionClassifier

__all__ = [
    "LLMClient",
    "LLMError",
    "LLMResponse",
    "LLMTextEmotionClassifier",
]
