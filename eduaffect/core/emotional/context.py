# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment input data structures.

This module defines the validated inputs of an emotional assessment:
- LearningContext: where and how the learner is working
- BehavioralTelemetry / PerformanceTelemetry: the optional signal blocks
- AssessmentRequest: the complete request accepted by the service

Malformed caller input is rejected here, before any analyzer runs.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from eduaffect.core.emotional.constants import PerformanceIndicator, SocialContext


class AssessmentValidationError(Exception):
    """Raised when an assessment request fails validation.

    Attributes:
        message: Error description.
        errors: Structured validation errors from pydantic.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)


class LearningContext(BaseModel):
    """Activity context an emotional state was observed in.

    Attributes:
        activity: What the learner was doing (e.g. "quiz").
        subject: Subject area.
        difficulty_level: Difficulty on a 0-10 scale.
        performance_indicator: struggling, neutral or succeeding.
        social_context: individual, peer_interaction or teacher_interaction.
    """

    model_config = ConfigDict(frozen=True)

    activity: str = Field(description="Current learning activity")
    subject: str = Field(description="Subject area")
    difficulty_level: float = Field(ge=0.0, le=10.0, description="Difficulty on a 0-10 scale")
    performance_indicator: PerformanceIndicator = Field(description="How the learner is doing")
    social_context: SocialContext = Field(description="Social setting of the activity")


class BehavioralTelemetry(BaseModel):
    """Interaction timing and error behaviour.

    Attributes:
        response_time: Average response time in seconds.
        error_rate: Share of wrong answers (0-1).
        help_seeking: Whether the learner asked for help.
        task_switching: Number of task switches in the observation window.
        engagement_level: Engagement estimate (0-1).
    """

    model_config = ConfigDict(frozen=True)

    response_time: float = Field(ge=0.0, description="Average response time in seconds")
    error_rate: float = Field(ge=0.0, le=1.0, description="Share of wrong answers")
    help_seeking: bool = Field(default=False, description="Learner asked for help")
    task_switching: int = Field(default=0, ge=0, description="Number of task switches")
    engagement_level: float = Field(ge=0.0, le=1.0, description="Engagement estimate")


class PerformanceTelemetry(BaseModel):
    """Score and attempt telemetry. Scores use a 0-100 scale.

    Attributes:
        current_score: Score achieved.
        expected_score: Score the learner was expected to achieve.
        difficulty_level: Task difficulty on a 0-10 scale.
        attempts: Number of attempts so far.
    """

    model_config = ConfigDict(frozen=True)

    current_score: float = Field(ge=0.0, le=100.0, description="Score achieved")
    expected_score: float = Field(ge=0.0, le=100.0, description="Expected score")
    difficulty_level: float = Field(ge=0.0, le=10.0, description="Task difficulty")
    attempts: int = Field(default=1, ge=0, description="Attempts so far")


class AssessmentRequest(BaseModel):
    """A single emotional assessment request.

    Any of text, behavior and performance may be omitted; context is required.

    Attributes:
        learner_id: Learner the assessment is for.
        session_id: Learning session identifier.
        text: Free text written by the learner.
        behavior: Behavioural telemetry block.
        performance: Performance telemetry block.
        context: Activity context.
    """

    model_config = ConfigDict(frozen=True)

    learner_id: str = Field(min_length=1, description="Learner identifier")
    session_id: str = Field(min_length=1, description="Session identifier")
    text: str | None = Field(default=None, description="Free text from the learner")
    behavior: BehavioralTelemetry | None = Field(default=None, description="Behavioural telemetry")
    performance: PerformanceTelemetry | None = Field(default=None, description="Performance telemetry")
    context: LearningContext = Field(description="Activity context")

    @field_validator("text")
    @classmethod
    def _blank_text_is_absent(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AssessmentRequest":
        """Validate a raw payload.

        Args:
            payload: Untrusted request data.

        Returns:
            Validated AssessmentRequest.

        Raises:
            AssessmentValidationError: If the payload is malformed.
        """
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise AssessmentValidationError(
                f"Invalid assessment request: {e.error_count()} validation error(s)",
                errors=e.errors(include_url=False),
            ) from e
