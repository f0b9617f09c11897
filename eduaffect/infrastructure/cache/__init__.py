# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cache infrastructure using Redis.

This package provides the Redis client used by the persistent emotional
state repository. Learner isolation is achieved via key prefixes:
{key_prefix}:learner:{learner_id}:*

Example:
    from eduaffect.infrastructure.cache import init_redis, close_redis

    # Initialize at application startup
    client = await init_redis(settings)
    repository = RedisEmotionalRepository(client)

    # Cleanup at shutdown
    await close_redis()
"""

from eduaffect.infrastructure.cache.redis_client import (
    RedisClient,
    RedisError,
    close_redis,
    init_redis,
)

__all__ = [
    "RedisClient",
    "RedisError",
    "close_redis",
    "init_redis",
]
