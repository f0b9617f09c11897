# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Emotional intelligence API endpoints.

This module provides endpoints for:
- POST /assessments - Assess a learner's emotional state
- GET /learners/{learner_id}/history - Recent emotional states
- GET /learners/{learner_id}/states/{state_id} - One emotional state
- GET /learners/{learner_id}/profile - Emotional profile
- GET /learners/{learner_id}/interventions - Active interventions
- POST /learners/{learner_id}/interventions/{intervention_id}/acknowledge
- GET /learners/{learner_id}/insights - Fresh insights
- GET /techniques - Technique catalog

Example:
    POST /api/v1/emotional/assessments
    {
        "learner_id": "learner-1",
        "session_id": "session-1",
        "text": "This is way too hard",
        "behavior": {"response_time": 40, "error_rate": 0.8, ...},
        "context": {"activity": "quiz", "subject": "math", ...}
    }
"""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from eduaffect.api.dependencies import EmotionalService
from eduaffect.core.emotional import (
    AssessmentRequest,
    EmotionalTechnique,
    EmotionType,
    InsightType,
    InterventionPriority,
    InterventionType,
    LearningContext,
)
from eduaffect.core.emotional.constants import (
    DifficultyProgression,
    FeedbackStyle,
    ImpactLevel,
    SocialSetting,
)
from eduaffect.utils.logging import learner_context

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Response Models
# ============================================================================


class EmotionalStateResponse(BaseModel):
    """A learner's fused emotional state."""

    id: str = Field(description="State ID")
    timestamp: datetime = Field(description="When the state was assessed")
    learner_id: str = Field(description="Learner ID")
    session_id: str = Field(description="Session ID")
    primary_emotion: EmotionType = Field(description="Dominant emotion")
    secondary_emotions: list[EmotionType] = Field(description="Up to three other emotions")
    intensity: float = Field(ge=0.0, le=1.0, description="Emotion strength")
    valence: float = Field(ge=-1.0, le=1.0, description="Negative to positive")
    arousal: float = Field(ge=0.0, le=1.0, description="Calm to activated")
    confidence: float = Field(ge=0.0, le=1.0, description="Assessment confidence")
    triggers: list[str] = Field(description="Trigger tags")
    context: LearningContext = Field(description="Activity context")


class LearningPreferencesResponse(BaseModel):
    """Inferred learning preferences."""

    difficulty_progression: DifficultyProgression
    feedback_style: FeedbackStyle
    social_setting: SocialSetting


class ResilienceResponse(BaseModel):
    """Resilience indicators."""

    frustration_tolerance: float = Field(ge=0.0, le=1.0)
    recovery_speed: float = Field(ge=0.0, le=1.0)
    help_seeking_tendency: float = Field(ge=0.0, le=1.0)
    persistence_level: float = Field(ge=0.0, le=1.0)


class EQScoresResponse(BaseModel):
    """Emotional intelligence scores."""

    self_awareness: float = Field(ge=0.0, le=1.0)
    self_regulation: float = Field(ge=0.0, le=1.0)
    motivation: float = Field(ge=0.0, le=1.0)
    empathy: float = Field(ge=0.0, le=1.0)
    social_skills: float = Field(ge=0.0, le=1.0)
    overall_eq: float = Field(ge=0.0, le=1.0)


class EmotionalProfileResponse(BaseModel):
    """A learner's rolling emotional profile."""

    learner_id: str = Field(description="Learner ID")
    frequent_emotions: list[EmotionType] = Field(description="Most frequent emotions")
    stress_triggers: list[str] = Field(description="Triggers seen in stress states")
    motivation_drivers: list[str] = Field(description="Triggers seen in motivating states")
    optimal_emotional_states: list[EmotionType] = Field(description="Best states for learning")
    learning_preferences: LearningPreferencesResponse
    resilience: ResilienceResponse
    eq_scores: EQScoresResponse
    window_size: int = Field(description="States the profile was built from")
    last_updated: datetime = Field(description="When the profile was built")


class InterventionResponse(BaseModel):
    """A queued intervention."""

    id: str = Field(description="Intervention ID")
    emotion_triggers: list[EmotionType] = Field(description="Emotions that caused it")
    intervention_type: InterventionType
    priority: InterventionPriority
    title: str
    description: str
    techniques: list[EmotionalTechnique] = Field(description="Techniques to offer")
    expected_outcome: str
    estimated_duration: int = Field(description="Duration in minutes")
    success_criteria: list[str]
    follow_up_actions: list[str]
    source_state_id: str = Field(description="State that triggered it")
    created_at: datetime


class InsightResponse(BaseModel):
    """A generated insight."""

    id: str = Field(description="Insight ID")
    learner_id: str
    insight_type: InsightType
    title: str
    description: str
    evidence: list[str]
    actionable_steps: list[str]
    confidence: float = Field(ge=0.0, le=1.0)
    impact_level: ImpactLevel
    generated_at: datetime


class AcknowledgeResponse(BaseModel):
    """Result of acknowledging an intervention."""

    removed: bool = Field(description="Whether the intervention was queued")


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/assessments",
    response_model=EmotionalStateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assess emotional state",
    description="Fuse text, behaviour and performance signals into a new emotional state.",
)
async def create_assessment(
    request: AssessmentRequest,
    service: EmotionalService,
) -> EmotionalStateResponse:
    """Assess a learner's emotional state.

    Args:
        request: Signals and context of the assessment.
        service: Emotional intelligence service.

    Returns:
        The new emotional state.
    """
    with learner_context(request.learner_id, request.session_id):
        state = await service.assess(request)
    return EmotionalStateResponse.model_validate(state.to_dict())


@router.get(
    "/learners/{learner_id}/history",
    response_model=list[EmotionalStateResponse],
    summary="Get emotional history",
)
async def get_history(
    learner_id: str,
    service: EmotionalService,
    limit: Annotated[int, Query(ge=1, le=500, description="Maximum states to return")] = 20,
) -> list[EmotionalStateResponse]:
    """Get a learner's most recent states, oldest first."""
    states = await service.get_history(learner_id, limit=limit)
    return [EmotionalStateResponse.model_validate(s.to_dict()) for s in states]


@router.get(
    "/learners/{learner_id}/states/{state_id}",
    response_model=EmotionalStateResponse,
    summary="Get emotional state",
)
async def get_state(
    learner_id: str,
    state_id: str,
    service: EmotionalService,
) -> EmotionalStateResponse:
    """Get one emotional state.

    Raises:
        HTTPException: 404 if the state does not exist.
    """
    state = await service.get_state(learner_id, state_id)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"State {state_id} not found",
        )
    return EmotionalStateResponse.model_validate(state.to_dict())


@router.get(
    "/learners/{learner_id}/profile",
    response_model=EmotionalProfileResponse,
    summary="Get emotional profile",
)
async def get_profile(
    learner_id: str,
    service: EmotionalService,
) -> EmotionalProfileResponse:
    """Get a learner's emotional profile.

    Raises:
        HTTPException: 404 if the learner has no history.
    """
    profile = await service.get_profile(learner_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No emotional profile for learner {learner_id}",
        )
    return EmotionalProfileResponse.model_validate(profile.to_dict())


@router.get(
    "/learners/{learner_id}/interventions",
    response_model=list[InterventionResponse],
    summary="List active interventions",
)
async def list_interventions(
    learner_id: str,
    service: EmotionalService,
) -> list[InterventionResponse]:
    """Get a learner's intervention queue in enqueue order."""
    interventions = await service.list_interventions(learner_id)
    return [InterventionResponse.model_validate(i.to_dict()) for i in interventions]


@router.post(
    "/learners/{learner_id}/interventions/{intervention_id}/acknowledge",
    response_model=AcknowledgeResponse,
    summary="Acknowledge intervention",
)
async def acknowledge_intervention(
    learner_id: str,
    intervention_id: str,
    service: EmotionalService,
) -> AcknowledgeResponse:
    """Remove an intervention from a learner's queue."""
    removed = await service.acknowledge_intervention(learner_id, intervention_id)
    return AcknowledgeResponse(removed=removed)


@router.get(
    "/learners/{learner_id}/insights",
    response_model=list[InsightResponse],
    summary="Generate insights",
)
async def get_insights(
    learner_id: str,
    service: EmotionalService,
) -> list[InsightResponse]:
    """Derive fresh insights from a learner's history."""
    insights = await service.generate_insights(learner_id)
    return [InsightResponse.model_validate(i.to_dict()) for i in insights]


@router.get(
    "/techniques",
    response_model=list[EmotionalTechnique],
    summary="List techniques",
)
async def list_techniques(service: EmotionalService) -> list[EmotionalTechnique]:
    """Get the emotional technique catalog."""
    return service.list_techniques()
