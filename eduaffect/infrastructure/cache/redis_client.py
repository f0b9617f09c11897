# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Redis client backing the persistent emotional state repository.

This module provides an async Redis client wrapper with learner
isolation support. All learner-specific keys are prefixed with
{key_prefix}:learner:{learner_id}: so one learner's data can be listed
or dropped without touching another's.

Example:
    from eduaffect.infrastructure.cache import init_redis

    # Initialize at startup
    redis = await init_redis(settings)

    # Use the client
    key = redis.learner_key("learner-1", "states")
    async with redis.lock(redis.learner_key("learner-1", "lock")):
        await redis.rpush(key, state.to_dict())
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import LockError
from redis.exceptions import RedisError as BaseRedisError

if TYPE_CHECKING:
    from eduaffect.core.config.settings import Settings

logger = logging.getLogger(__name__)

# Module-level state
_redis_client: Optional["RedisClient"] = None


class RedisError(Exception):
    """Exception raised for Redis operation failures.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying Redis error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the Redis error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class RedisClient:
    """Async Redis client with learner-namespaced keys.

    This client wraps the redis-py async client and provides:
    - Connection pooling
    - Learner-isolated key prefixing
    - JSON serialization/deserialization
    - String and list operations used by the state repository

    Example:
        client = RedisClient(settings)
        await client.connect()

        key = client.learner_key("learner-1", "profile")
        await client.set(key, profile.to_dict())
        data = await client.get(key)

        await client.close()
    """

    LEARNER_KEY_SEGMENT = "learner"

    def __init__(self, settings: "Settings", redis: Optional[Redis] = None) -> None:
        """Initialize the Redis client.

        Args:
            settings: Application settings containing Redis configuration.
            redis: Pre-built redis-py client, used instead of connect().
        """
        self._settings = settings
        self._pool: Optional[ConnectionPool] = None
        self._redis: Optional[Redis] = redis

    async def connect(self) -> None:
        """Create the Redis connection pool.

        Raises:
            RedisError: If connection fails.
        """
        try:
            self._pool = ConnectionPool.from_url(
                self._settings.redis.url,
                max_connections=self._settings.redis.max_connections,
                decode_responses=True,
            )
            self._redis = Redis(connection_pool=self._pool)

            # Verify connection
            await self._redis.ping()
        except BaseRedisError as e:
            raise RedisError("Failed to connect to Redis", e) from e

    async def close(self) -> None:
        """Close the Redis connection pool."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

    def _ensure_connected(self) -> Redis:
        """Ensure the client is connected.

        Returns:
            The Redis client instance.

        Raises:
            RedisError: If not connected.
        """
        if self._redis is None:
            raise RedisError("Redis client not connected. Call connect() first.")
        return self._redis

    def learner_key(self, learner_id: str, key: str) -> str:
        """Build a learner-prefixed key.

        Args:
            learner_id: The learner id.
            key: The key within the learner namespace.

        Returns:
            Key prefixed with {key_prefix}:learner:{learner_id}:
        """
        prefix = self._settings.redis.key_prefix
        return f"{prefix}:{self.LEARNER_KEY_SEGMENT}:{learner_id}:{key}"

    def _serialize(self, value: Any) -> str:
        """Serialize a value to JSON string.

        Args:
            value: The value to serialize.

        Returns:
            JSON string representation.
        """
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False, default=str)

    def _deserialize(self, value: Optional[str]) -> Any:
        """Deserialize a JSON string to Python object.

        Args:
            value: The JSON string to deserialize.

        Returns:
            Python object or None if value is None.
        """
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    # ========== String operations ==========

    async def set(
        self,
        key: str,
        value: Any,
        expire_seconds: Optional[int] = None,
    ) -> None:
        """Set a key-value pair.

        Args:
            key: The key.
            value: The value (will be JSON serialized if not a string).
            expire_seconds: Optional expiration time in seconds.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            serialized = self._serialize(value)
            await redis.set(key, serialized, ex=expire_seconds)
        except BaseRedisError as e:
            raise RedisError(f"Failed to set key: {key}", e) from e

    async def get(self, key: str) -> Any:
        """Get a value by key.

        Args:
            key: The key.

        Returns:
            The deserialized value or None if not found.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            value = await redis.get(key)
            return self._deserialize(value)
        except BaseRedisError as e:
            raise RedisError(f"Failed to get key: {key}", e) from e

    # ========== List operations ==========

    async def rpush(self, key: str, *values: Any) -> int:
        """Append values to the tail of a list.

        Args:
            key: The list key.
            *values: Values to append (JSON serialized if not strings).

        Returns:
            Length of the list after the push.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            return await redis.rpush(key, *(self._serialize(v) for v in values))
        except BaseRedisError as e:
            raise RedisError(f"Failed to push to list: {key}", e) from e

    async def lrange(self, key: str, start: int = 0, end: int = -1) -> list[Any]:
        """Get a slice of a list, deserialized.

        Args:
            key: The list key.
            start: First index (negative counts from the tail).
            end: Last index, inclusive.

        Returns:
            Deserialized list elements.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            values = await redis.lrange(key, start, end)
            return [self._deserialize(v) for v in values]
        except BaseRedisError as e:
            raise RedisError(f"Failed to read list: {key}", e) from e

    async def lrange_raw(self, key: str, start: int = 0, end: int = -1) -> list[str]:
        """Get a slice of a list without deserializing.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            return await redis.lrange(key, start, end)
        except BaseRedisError as e:
            raise RedisError(f"Failed to read list: {key}", e) from e

    async def lrem(self, key: str, raw_value: str, count: int = 1) -> int:
        """Remove occurrences of an exact raw value from a list.

        Args:
            key: The list key.
            raw_value: Serialized element as returned by lrange_raw().
            count: Maximum number of occurrences to remove.

        Returns:
            Number of removed elements.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            return await redis.lrem(key, count, raw_value)
        except BaseRedisError as e:
            raise RedisError(f"Failed to remove from list: {key}", e) from e

    # ========== Locks ==========

    @asynccontextmanager
    async def lock(self, key: str) -> AsyncIterator[None]:
        """Hold a Redis lock shared by every process using this server.

        The lock expires after redis.lock_timeout seconds even when it
        is never released.

        Args:
            key: The lock key.

        Raises:
            RedisError: If the lock cannot be acquired within
                redis.lock_blocking_timeout seconds or Redis fails.
        """
        redis = self._ensure_connected()
        lock = redis.lock(
            key,
            timeout=self._settings.redis.lock_timeout,
            blocking_timeout=self._settings.redis.lock_blocking_timeout,
        )
        try:
            acquired = await lock.acquire()
        except BaseRedisError as e:
            raise RedisError(f"Failed to acquire lock: {key}", e) from e
        if not acquired:
            raise RedisError(f"Timed out waiting for lock: {key}")

        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                logger.warning("Lock %s expired before release", key)

    # ========== Health check ==========

    async def ping(self) -> bool:
        """Check if Redis is reachable.

        Returns:
            True if Redis responds to ping, False otherwise.
        """
        try:
            redis = self._ensure_connected()
            await redis.ping()
            return True
        except (RedisError, BaseRedisError):
            return False


# ========== Module-level functions ==========


async def init_redis(settings: "Settings") -> RedisClient:
    """Initialize the global Redis client.

    This should be called once at application startup.

    Args:
        settings: Application settings containing Redis configuration.

    Returns:
        The connected RedisClient.

    Raises:
        RedisError: If connection fails.
    """
    global _redis_client

    _redis_client = RedisClient(settings)
    await _redis_client.connect()
    return _redis_client


async def close_redis() -> None:
    """Close the global Redis client.

    This should be called at application shutdown.
    """
    global _redis_client

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None
