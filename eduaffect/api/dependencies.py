# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection providers.

The emotional intelligence service is built once at application startup
(see eduaffect.api.app.lifespan) and stored on app.state. Endpoints
receive it through get_emotional_service.

Example:
    @router.get("/learners/{learner_id}/profile")
    async def get_profile(learner_id: str, service: EmotionalService):
        return await service.get_profile(learner_id)
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from eduaffect.core.config.settings import Settings
from eduaffect.core.emotional import (
    EmotionalIntelligenceService,
    EmotionalRepository,
    InsightGenerator,
    ProfileAggregator,
    TechniqueCatalog,
    TextSignalAnalyzer,
)
from eduaffect.core.intelligence.llm import LLMClient, LLMTextEmotionClassifier

logger = logging.getLogger(__name__)


def build_emotional_service(
    settings: Settings,
    repository: EmotionalRepository,
    catalog: TechniqueCatalog | None = None,
    text_analyzer: TextSignalAnalyzer | None = None,
) -> EmotionalIntelligenceService:
    """Wire an EmotionalIntelligenceService from settings.

    Args:
        settings: Application settings.
        repository: Storage backend.
        catalog: Technique catalog. Loaded from settings when None.
        text_analyzer: Text analyzer. An LLM-backed one is built when None.

    Returns:
        Ready-to-use service.

    Raises:
        TechniqueCatalogError: If the catalog cannot be loaded or is incomplete.
    """
    engine = settings.emotional

    if catalog is None:
        catalog = TechniqueCatalog.from_yaml(engine.techniques_path)

    if text_analyzer is None:
        classifier = LLMTextEmotionClassifier(LLMClient(llm_settings=settings.llm))
        text_analyzer = TextSignalAnalyzer(classifier, timeout=engine.text_analysis_timeout)

    aggregator = ProfileAggregator(window=engine.profile_window)
    return EmotionalIntelligenceService(
        repository=repository,
        catalog=catalog,
        text_analyzer=text_analyzer,
        aggregator=aggregator,
        insight_generator=InsightGenerator(aggregator, min_states=engine.insight_min_states),
    )


def get_emotional_service(request: Request) -> EmotionalIntelligenceService:
    """Get the emotional intelligence service.

    Args:
        request: The incoming request.

    Returns:
        The service initialized at application startup.

    Raises:
        HTTPException: If the service is not initialized.
    """
    service = getattr(request.app.state, "emotional_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Emotional intelligence service not initialized",
        )
    return service


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

EmotionalService = Annotated[EmotionalIntelligenceService, Depends(get_emotional_service)]
