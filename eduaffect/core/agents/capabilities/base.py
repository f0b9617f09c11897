# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base capability definitions.

This module provides the foundational abstractions for LLM capabilities:
- CapabilityContext: Learning context and extra data for prompt building
- Capability: Abstract base class for all capabilities
- CapabilityResult: Base class for capability outputs
- CapabilityError: Exception for capability-related errors

Capabilities are responsible for:
1. Building prompts from context (build_prompt)
2. Parsing LLM responses into structured outputs (parse_response)

Capabilities do NOT call the LLM - the caller orchestrates that.
"""

import json
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from eduaffect.core.emotional.context import LearningContext


class CapabilityError(Exception):
    """Exception raised for capability-related errors.

    Attributes:
        message: Error description.
        capability_name: Name of the capability that raised the error.
        original_error: Original exception if any.
    """

    def __init__(
        self,
        message: str,
        capability_name: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.capability_name = capability_name
        self.original_error = original_error
        super().__init__(self.message)


class CapabilityContext(BaseModel):
    """Context passed to capabilities for prompt building.

    Attributes:
        learning: Activity context of the learner, if known.
    """

    learning: LearningContext | None = Field(
        default=None,
        description="Activity context of the learner",
    )

    def get_learning_context(self) -> str:
        """Format the learning context for prompt inclusion.

        Returns:
            Formatted context, or an empty string when none is set.
        """
        if self.learning is None:
            return ""

        ctx = self.learning
        parts = [
            "Learning Context:",
            f"- Activity: {ctx.activity}",
            f"- Subject: {ctx.subject}",
            f"- Difficulty: {ctx.difficulty_level:g}/10",
            f"- Performance: {ctx.performance_indicator.value}",
            f"- Social setting: {ctx.social_context.value}",
        ]
        return "\n".join(parts)


class CapabilityResult(BaseModel):
    """Base class for capability execution results.

    Attributes:
        success: Whether the capability executed successfully.
        capability_name: Name of the capability that produced this result.
        generated_at: Timestamp when the result was generated.
        raw_response: Original LLM response text (for debugging).
        metadata: Additional metadata about the execution.
    """

    success: bool = Field(
        default=True,
        description="Whether the capability executed successfully",
    )
    capability_name: str = Field(
        description="Name of the capability that produced this result",
    )
    generated_at: datetime = Field(
        default_factory=datetime.now,
        description="Timestamp when the result was generated",
    )
    raw_response: str | None = Field(
        default=None,
        description="Original LLM response text",
        repr=False,
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata about the execution",
    )


class Capability(ABC):
    """Abstract base class for all LLM capabilities.

    The capability does NOT call the LLM directly. The caller:
    1. Calls capability.build_prompt(params, context)
    2. Sends the messages to the LLM
    3. Calls capability.parse_response(llm_response)

    Example:
        class MyCapability(Capability):
            @property
            def name(self) -> str:
                return "my_capability"

            def build_prompt(self, params, context):
                return [
                    {"role": "system", "content": "You are a helpful tutor."},
                    {"role": "user", "content": f"Help with: {params['topic']}"}
                ]

            def parse_response(self, response):
                return MyResult(capability_name=self.name, content=response)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name of this capability."""
        ...

    @property
    def description(self) -> str:
        """Return a description of what this capability does."""
        return ""

    @abstractmethod
    def build_prompt(
        self,
        params: dict[str, Any],
        context: CapabilityContext,
    ) -> list[dict[str, str]]:
        """Build the prompt messages for the LLM.

        Args:
            params: Capability-specific input parameters.
            context: Learning context and extra data.

        Returns:
            List of message dicts with 'role' and 'content' keys.
        """
        ...

    @abstractmethod
    def parse_response(self, response: str) -> CapabilityResult:
        """Parse the LLM response into a structured result.

        Args:
            response: Raw text response from LLM.

        Returns:
            Capability-specific result object.

        Raises:
            CapabilityError: If response cannot be parsed.
        """
        ...

    def validate_params(self, params: dict[str, Any]) -> None:
        """Validate input parameters before prompt building.

        Override this method to add parameter validation.

        Args:
            params: Parameters to validate.

        Raises:
            CapabilityError: If parameters are invalid.
        """
        pass

    def _extract_json_from_response(self, response: str) -> dict[str, Any]:
        """Extract JSON object from LLM response.

        Handles common patterns like markdown code blocks.

        Args:
            response: Raw LLM response text.

        Returns:
            Parsed JSON as dictionary.

        Raises:
            CapabilityError: If JSON cannot be extracted.
        """
        text = response.strip()

        # Try to find JSON in markdown code block
        match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
        if match:
            text = match.group(1).strip()

        # Try to find JSON object directly
        match = re.search(r"\{[\s\S]*\}", text)
        if match:
            text = match.group(0)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CapabilityError(
                message=f"Failed to parse JSON from response: {e}",
                capability_name=self.name,
                original_error=e,
            ) from e

        if not isinstance(data, dict):
            raise CapabilityError(
                message="Response JSON is not an object",
                capability_name=self.name,
            )
        return data

    def __repr__(self) -> str:
        """Return string representation."""
        return f"{self.__class__.__name__}(name={self.name!r})"
