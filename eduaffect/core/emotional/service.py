# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Emotional intelligence service.

EmotionalIntelligenceService is the facade the API layer talks to. One
assessment runs the pipeline:

    validate -> analyze (concurrently)
             -> [learner lock] synthesize -> append state -> rebuild profile
                               -> select and enqueue interventions

Everything after analysis runs under the repository's learner lock so
two concurrent assessments for the same learner, in this process or in
another worker sharing the store, cannot interleave their history
writes. The state is timestamped inside the lock, which keeps the
history in timestamp order. Different learners never share a lock.

Example:
    service = EmotionalIntelligenceService(
        text_analyzer=TextSignalAnalyzer(LLMTextEmotionClassifier(llm_client)),
        repository=InMemoryEmotionalRepository(),
        catalog=TechniqueCatalog.from_yaml(),
    )
    state = await service.assess({
        "learner_id": "learner-1",
        "session_id": "session-1",
        "text": "I don't get this at all",
        "context": {...},
    })
"""

import asyncio
import logging
from typing import Any

from eduaffect.core.emotional.analyzers import (
    BehavioralSignalAnalyzer,
    PerformanceSignalAnalyzer,
    TextSignalAnalyzer,
)
from eduaffect.core.emotional.catalog import EmotionalTechnique, TechniqueCatalog
from eduaffect.core.emotional.constants import EmotionalThresholds
from eduaffect.core.emotional.context import AssessmentRequest
from eduaffect.core.emotional.insights import EmotionalInsight, InsightGenerator
from eduaffect.core.emotional.interventions import EmotionalIntervention, InterventionSelector
from eduaffect.core.emotional.profile import EmotionalProfile, ProfileAggregator
from eduaffect.core.emotional.repository import EmotionalRepository
from eduaffect.core.emotional.state import (
    BehavioralEstimate,
    EmotionalState,
    PerformanceEstimate,
    SignalReadings,
    TextEstimate,
)
from eduaffect.core.emotional.synthesizer import SignalSynthesizer

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20


class EmotionalIntelligenceService:
    """Coordinates analyzers, fusion, storage, interventions and insights."""

    def __init__(
        self,
        repository: EmotionalRepository,
        catalog: TechniqueCatalog,
        text_analyzer: TextSignalAnalyzer | None = None,
        behavioral_analyzer: BehavioralSignalAnalyzer | None = None,
        performance_analyzer: PerformanceSignalAnalyzer | None = None,
        synthesizer: SignalSynthesizer | None = None,
        aggregator: ProfileAggregator | None = None,
        selector: InterventionSelector | None = None,
        insight_generator: InsightGenerator | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Storage for states, profiles and interventions.
            catalog: Technique catalog.
            text_analyzer: Text analyzer. When None, text is ignored.
            behavioral_analyzer: Behaviour analyzer.
            performance_analyzer: Performance analyzer.
            synthesizer: Signal fusion.
            aggregator: Profile builder.
            selector: Intervention rules. Built from catalog when None.
            insight_generator: Insight rules.

        Raises:
            TechniqueCatalogError: If the catalog lacks techniques the
                intervention rules need.
        """
        self._repository = repository
        self._catalog = catalog
        self._text_analyzer = text_analyzer
        self._behavioral_analyzer = behavioral_analyzer or BehavioralSignalAnalyzer()
        self._performance_analyzer = performance_analyzer or PerformanceSignalAnalyzer()
        self._synthesizer = synthesizer or SignalSynthesizer()
        self._aggregator = aggregator or ProfileAggregator()
        self._selector = selector or InterventionSelector(catalog)
        self._insight_generator = insight_generator or InsightGenerator(self._aggregator)
        self._history_window = max(self._aggregator.window, EmotionalThresholds.PATTERN_WINDOW)

    @property
    def catalog(self) -> TechniqueCatalog:
        """Technique catalog used for interventions."""
        return self._catalog

    # ========== Assessment ==========

    async def assess(self, request: AssessmentRequest | dict[str, Any]) -> EmotionalState:
        """Assess a learner's emotional state from the available signals.

        Args:
            request: Validated request or raw payload.

        Returns:
            The new EmotionalState, already appended to the history.

        Raises:
            AssessmentValidationError: If a raw payload is malformed. No
                analyzer runs in that case.
        """
        if not isinstance(request, AssessmentRequest):
            request = AssessmentRequest.from_payload(request)

        readings = await self._analyze(request)

        async with self._repository.learner_lock(request.learner_id):
            state = self._synthesizer.synthesize(
                readings,
                learner_id=request.learner_id,
                session_id=request.session_id,
                context=request.context,
            )
            await self._repository.append_state(state)
            history = await self._repository.list_states(
                request.learner_id, limit=self._history_window
            )
            await self._refresh_profile(request.learner_id, history)

            interventions = self._selector.select(
                state, history[-EmotionalThresholds.PATTERN_WINDOW:]
            )
            await self._repository.enqueue_interventions(request.learner_id, interventions)

        logger.info(
            "Assessed learner %s: %s (intensity=%.2f, interventions=%d)",
            request.learner_id,
            state.primary_emotion.value,
            state.intensity,
            len(interventions),
        )
        return state

    async def _analyze(self, request: AssessmentRequest) -> SignalReadings:
        """Run every analyzer that has input, concurrently."""

        async def text() -> TextEstimate | None:
            if request.text is None or self._text_analyzer is None:
                return None
            return await self._text_analyzer.analyze(request.text, request.context)

        async def behavior() -> BehavioralEstimate | None:
            if request.behavior is None:
                return None
            return self._behavioral_analyzer.analyze(request.behavior, request.context)

        async def performance() -> PerformanceEstimate | None:
            if request.performance is None:
                return None
            return self._performance_analyzer.analyze(request.performance, request.context)

        text_estimate, behavior_estimate, performance_estimate = await asyncio.gather(
            text(), behavior(), performance()
        )
        return SignalReadings(
            text=text_estimate,
            behavior=behavior_estimate,
            performance=performance_estimate,
        )

    async def _refresh_profile(
        self,
        learner_id: str,
        history: list[EmotionalState],
    ) -> EmotionalProfile | None:
        profile = self._aggregator.build(learner_id, history)
        if profile is not None:
            await self._repository.save_profile(profile)
        return profile

    # ========== Queries ==========

    async def get_state(self, learner_id: str, state_id: str) -> EmotionalState | None:
        """Get one state of a learner, or None."""
        return await self._repository.get_state(learner_id, state_id)

    async def get_history(
        self,
        learner_id: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[EmotionalState]:
        """Get a learner's most recent states, oldest first."""
        return await self._repository.list_states(learner_id, limit=limit)

    async def get_profile(self, learner_id: str) -> EmotionalProfile | None:
        """Get a learner's profile.

        The cached profile is returned when present. Otherwise it is
        rebuilt from the history and cached.

        Returns:
            EmotionalProfile, or None for a learner with no history.
        """
        profile = await self._repository.get_profile(learner_id)
        if profile is not None:
            return profile

        async with self._repository.learner_lock(learner_id):
            history = await self._repository.list_states(
                learner_id, limit=self._aggregator.window
            )
            profile = await self._refresh_profile(learner_id, history)

        if profile is not None:
            logger.debug("Rebuilt missing profile for learner %s", learner_id)
        return profile

    async def list_interventions(self, learner_id: str) -> list[EmotionalIntervention]:
        """Get a learner's active intervention queue in enqueue order."""
        return await self._repository.list_interventions(learner_id)

    async def acknowledge_intervention(self, learner_id: str, intervention_id: str) -> bool:
        """Remove an intervention from a learner's queue.

        Returns:
            True if the intervention was queued, False otherwise.
        """
        async with self._repository.learner_lock(learner_id):
            removed = await self._repository.remove_intervention(learner_id, intervention_id)
        if removed:
            logger.info("Intervention %s acknowledged by learner %s", intervention_id, learner_id)
        return removed

    async def generate_insights(self, learner_id: str) -> list[EmotionalInsight]:
        """Derive fresh insights from a learner's whole history."""
        history = await self._repository.list_states(learner_id)
        profile = await self.get_profile(learner_id)
        return self._insight_generator.generate(learner_id, history, profile)

    def list_techniques(self) -> list[EmotionalTechnique]:
        """Get every catalog technique."""
        return self._catalog.all()
