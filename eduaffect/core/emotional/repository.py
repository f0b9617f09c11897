# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-learner storage for states, profiles and intervention queues.

State history is append-only and timestamp-ordered per learner. The
profile is a cache derived from the history. The intervention queue is
ordered by enqueue time and shrinks only through acknowledgement.

Each learner has a single writer at a time: callers hold
learner_lock(learner_id) around every write.

Two implementations share the EmotionalRepository protocol:

- InMemoryEmotionalRepository: process-local dictionaries and
  asyncio locks, used in development and tests.
- RedisEmotionalRepository: JSON documents in Redis lists and strings,
  keyed {prefix}:learner:{learner_id}:{states|profile|interventions},
  with a Redis lock on {prefix}:learner:{learner_id}:lock shared by
  every worker.
"""

import asyncio
import json
import logging
from contextlib import AbstractAsyncContextManager
from typing import Protocol, runtime_checkable
from weakref import WeakValueDictionary

from eduaffect.core.emotional.interventions import EmotionalIntervention
from eduaffect.core.emotional.profile import EmotionalProfile
from eduaffect.core.emotional.state import EmotionalState
from eduaffect.infrastructure.cache.redis_client import RedisClient

logger = logging.getLogger(__name__)


class StateOrderError(Exception):
    """Raised when a state would break the timestamp order of a history."""

    def __init__(self, learner_id: str, state_id: str) -> None:
        self.learner_id = learner_id
        self.state_id = state_id
        super().__init__(
            f"State {state_id} is older than the latest state of learner {learner_id}"
        )


@runtime_checkable
class EmotionalRepository(Protocol):
    """Storage contract used by EmotionalIntelligenceService."""

    def learner_lock(self, learner_id: str) -> AbstractAsyncContextManager[object]:
        """Return the lock that serializes writes for one learner."""
        ...

    async def append_state(self, state: EmotionalState) -> None:
        """Append a state to its learner's history."""
        ...

    async def list_states(
        self,
        learner_id: str,
        limit: int | None = None,
    ) -> list[EmotionalState]:
        """Return the history oldest first, or its last `limit` entries."""
        ...

    async def get_state(self, learner_id: str, state_id: str) -> EmotionalState | None:
        """Return one state of a learner, or None."""
        ...

    async def save_profile(self, profile: EmotionalProfile) -> None:
        """Replace the cached profile of a learner."""
        ...

    async def get_profile(self, learner_id: str) -> EmotionalProfile | None:
        """Return the cached profile of a learner, or None."""
        ...

    async def enqueue_interventions(
        self,
        learner_id: str,
        interventions: list[EmotionalIntervention],
    ) -> None:
        """Append interventions to a learner's queue."""
        ...

    async def list_interventions(self, learner_id: str) -> list[EmotionalIntervention]:
        """Return a learner's queue in enqueue order."""
        ...

    async def remove_intervention(self, learner_id: str, intervention_id: str) -> bool:
        """Remove one queued intervention. Returns True if it was present."""
        ...


def _tail(items: list, limit: int | None) -> list:
    if limit is None:
        return list(items)
    if limit <= 0:
        return []
    return list(items[-limit:])


class InMemoryEmotionalRepository:
    """Process-local repository.

    Data is lost on restart. Locks are dropped once no task holds or
    awaits them.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()
        self._states: dict[str, list[EmotionalState]] = {}
        self._profiles: dict[str, EmotionalProfile] = {}
        self._interventions: dict[str, list[EmotionalIntervention]] = {}

    def learner_lock(self, learner_id: str) -> asyncio.Lock:
        lock = self._locks.get(learner_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[learner_id] = lock
        return lock

    async def append_state(self, state: EmotionalState) -> None:
        history = self._states.setdefault(state.learner_id, [])
        if history and state.timestamp < history[-1].timestamp:
            raise StateOrderError(state.learner_id, state.id)
        history.append(state)

    async def list_states(
        self,
        learner_id: str,
        limit: int | None = None,
    ) -> list[EmotionalState]:
        return _tail(self._states.get(learner_id, []), limit)

    async def get_state(self, learner_id: str, state_id: str) -> EmotionalState | None:
        for state in self._states.get(learner_id, []):
            if state.id == state_id:
                return state
        return None

    async def save_profile(self, profile: EmotionalProfile) -> None:
        self._profiles[profile.learner_id] = profile

    async def get_profile(self, learner_id: str) -> EmotionalProfile | None:
        return self._profiles.get(learner_id)

    async def enqueue_interventions(
        self,
        learner_id: str,
        interventions: list[EmotionalIntervention],
    ) -> None:
        if interventions:
            self._interventions.setdefault(learner_id, []).extend(interventions)

    async def list_interventions(self, learner_id: str) -> list[EmotionalIntervention]:
        return list(self._interventions.get(learner_id, []))

    async def remove_intervention(self, learner_id: str, intervention_id: str) -> bool:
        queue = self._interventions.get(learner_id, [])
        for index, intervention in enumerate(queue):
            if intervention.id == intervention_id:
                del queue[index]
                return True
        return False


class RedisEmotionalRepository:
    """Redis-backed repository.

    Example:
        client = await init_redis(settings)
        repository = RedisEmotionalRepository(client)
        async with repository.learner_lock(state.learner_id):
            await repository.append_state(state)
    """

    STATES_KEY = "states"
    PROFILE_KEY = "profile"
    INTERVENTIONS_KEY = "interventions"
    LOCK_KEY = "lock"

    def __init__(self, client: RedisClient) -> None:
        """Initialize the repository.

        Args:
            client: Connected RedisClient.
        """
        self._client = client

    def _key(self, learner_id: str, name: str) -> str:
        return self._client.learner_key(learner_id, name)

    def learner_lock(self, learner_id: str) -> AbstractAsyncContextManager[None]:
        return self._client.lock(self._key(learner_id, self.LOCK_KEY))

    async def append_state(self, state: EmotionalState) -> None:
        key = self._key(state.learner_id, self.STATES_KEY)
        last = await self._client.lrange(key, -1, -1)
        if last and EmotionalState.from_dict(last[0]).timestamp > state.timestamp:
            raise StateOrderError(state.learner_id, state.id)
        await self._client.rpush(key, state.to_dict())

    async def list_states(
        self,
        learner_id: str,
        limit: int | None = None,
    ) -> list[EmotionalState]:
        if limit is not None and limit <= 0:
            return []
        start = 0 if limit is None else -limit
        raw = await self._client.lrange(self._key(learner_id, self.STATES_KEY), start, -1)
        return [EmotionalState.from_dict(item) for item in raw]

    async def get_state(self, learner_id: str, state_id: str) -> EmotionalState | None:
        raw = await self._client.lrange(self._key(learner_id, self.STATES_KEY))
        for item in raw:
            if item.get("id") == state_id:
                return EmotionalState.from_dict(item)
        return None

    async def save_profile(self, profile: EmotionalProfile) -> None:
        await self._client.set(self._key(profile.learner_id, self.PROFILE_KEY), profile.to_dict())

    async def get_profile(self, learner_id: str) -> EmotionalProfile | None:
        data = await self._client.get(self._key(learner_id, self.PROFILE_KEY))
        if data is None:
            return None
        return EmotionalProfile.from_dict(data)

    async def enqueue_interventions(
        self,
        learner_id: str,
        interventions: list[EmotionalIntervention],
    ) -> None:
        if not interventions:
            return
        await self._client.rpush(
            self._key(learner_id, self.INTERVENTIONS_KEY),
            *(intervention.to_dict() for intervention in interventions),
        )

    async def list_interventions(self, learner_id: str) -> list[EmotionalIntervention]:
        raw = await self._client.lrange(self._key(learner_id, self.INTERVENTIONS_KEY))
        return [EmotionalIntervention.from_dict(item) for item in raw]

    async def remove_intervention(self, learner_id: str, intervention_id: str) -> bool:
        key = self._key(learner_id, self.INTERVENTIONS_KEY)
        for raw in await self._client.lrange_raw(key):
            if json.loads(raw).get("id") != intervention_id:
                continue
            removed = await self._client.lrem(key, raw)
            if removed:
                logger.debug("Removed intervention %s for learner %s", intervention_id, learner_id)
            return removed > 0
        return False
