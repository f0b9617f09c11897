# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM client using LiteLLM for multi-provider support.

This module provides a unified completion interface through LiteLLM.
API keys and endpoints are passed directly to LiteLLM's acompletion()
function rather than through environment variables.

Supported providers:
- Ollama: Local or remote LLM inference
- OpenAI: GPT-4o and friends
- Anthropic: Claude models
- Google: Gemini models

Example:
    >>> from eduaffect.core.intelligence.llm import LLMClient
    >>> client = LLMClient()
    >>> response = await client.complete_with_messages(
    ...     [{"role": "user", "content": "How does this learner feel?"}]
    ... )
    >>> print(response.content)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import litellm
from litellm import acompletion

from eduaffect.core.config.settings import LLMSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from an LLM completion.

    Attributes:
        content: The generated text content.
        model: The model that generated the response.
        tokens_input: Number of input tokens used.
        tokens_output: Number of output tokens generated.
        finish_reason: Why generation stopped (stop, length, etc.).
        raw_response: Original response object from LiteLLM.
    """

    content: str
    model: str
    tokens_input: int = 0
    tokens_output: int = 0
    finish_reason: str = "stop"
    raw_response: Optional[object] = field(default=None, repr=False)

    @property
    def total_tokens(self) -> int:
        """Get total tokens used (input + output)."""
        return self.tokens_input + self.tokens_output


class LLMError(Exception):
    """Exception raised when LLM operation fails.

    Attributes:
        message: Error description.
        model: Model that caused the error.
        error_code: Error code if available.
        original_error: Original exception if any.
    """

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.model = model
        self.error_code = error_code
        self.original_error = original_error
        super().__init__(self.message)


class LLMClient:
    """Client for LLM operations via LiteLLM.

    Attributes:
        model: Default model to use for completions.
        timeout: Request timeout in seconds.
        max_retries: Maximum retry attempts.

    Example:
        >>> client = LLMClient()
        >>> response = await client.complete_with_messages(
        ...     [{"role": "user", "content": "Classify: 'I give up'"}],
        ...     temperature=0.3,
        ... )
        >>> print(response.content)
    """

    def __init__(
        self,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        llm_settings: Optional[LLMSettings] = None,
    ):
        """Initialize the LLM client.

        Args:
            model: Default model in LiteLLM format. Falls back to settings.
            timeout: Request timeout in seconds. Falls back to settings.
            max_retries: Maximum retry attempts. Falls back to settings.
            llm_settings: LLM configuration. Uses get_settings() if None.
        """
        self._settings = llm_settings or get_settings().llm

        self._model = model or self._settings.get_default_model()
        self._timeout = timeout or self._settings.request_timeout
        self._max_retries = max_retries if max_retries is not None else self._settings.max_retries

        self._configure_litellm()

        logger.info(
            "LLMClient initialized with model=%s, timeout=%.1fs, max_retries=%d",
            self._model,
            self._timeout,
            self._max_retries,
        )

    def _configure_litellm(self) -> None:
        """Configure LiteLLM global settings."""
        litellm.drop_params = True

    @property
    def model(self) -> str:
        """Get the default model."""
        return self._model

    @property
    def timeout(self) -> float:
        """Get the request timeout in seconds."""
        return self._timeout

    @property
    def max_retries(self) -> int:
        """Get the maximum retry count."""
        return self._max_retries

    async def complete_with_messages(
        self,
        messages: list[dict[str, Any]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion from a list of messages.

        Args:
            messages: Conversation messages in OpenAI format.
                [{"role": "system", "content": "..."}, {"role": "user", "content": "..."}]
            model: Override default model for this request.
            temperature: Sampling temperature (0-2).
            max_tokens: Maximum tokens to generate.
            **kwargs: Additional LiteLLM parameters.

        Returns:
            LLMResponse with generated content and metadata.

        Raises:
            LLMError: If completion fails after retries.
            ValueError: If messages list is empty.
        """
        if not messages:
            raise ValueError("Messages list cannot be empty")

        use_model = model or self._model

        # Provider-specific params (api_base, api_key)
        provider_params = self._settings.get_provider_params(use_model)

        try:
            response = await acompletion(
                model=use_model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=self._timeout,
                num_retries=self._max_retries,
                **provider_params,
                **kwargs,
            )

            content = response.choices[0].message.content or ""
            finish_reason = response.choices[0].finish_reason or "stop"

            # Get token usage if available
            usage = getattr(response, "usage", None)
            tokens_input = getattr(usage, "prompt_tokens", 0) or 0
            tokens_output = getattr(usage, "completion_tokens", 0) or 0

            logger.debug(
                "Completion generated: model=%s, tokens_in=%d, tokens_out=%d",
                use_model,
                tokens_input,
                tokens_output,
            )

            return LLMResponse(
                content=content,
                model=use_model,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                finish_reason=finish_reason,
                raw_response=response,
            )

        except Exception as e:
            logger.error(
                "LLM completion with messages failed: model=%s, error=%s",
                use_model,
                str(e),
            )
            raise LLMError(
                message=f"Completion failed: {str(e)}",
                model=use_model,
                original_error=e,
            ) from e

    def __repr__(self) -> str:
        """Return string representation of the client."""
        return (
            f"LLMClient(model={self._model!r}, "
            f"timeout={self._timeout}, max_retries={self._max_retries})"
        )
