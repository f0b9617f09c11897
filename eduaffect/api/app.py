# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the EduAffect API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eduaffect import __version__
from eduaffect.api.dependencies import build_emotional_service
from eduaffect.api.routes import health
from eduaffect.api.v1 import router as v1_router
from eduaffect.core.config import get_settings
from eduaffect.core.emotional import (
    EmotionalRepository,
    InMemoryEmotionalRepository,
    RedisEmotionalRepository,
)
from eduaffect.infrastructure.cache import RedisError, close_redis, init_redis
from eduaffect.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes and cleans up:
    - Logging
    - Redis (when the redis store backend is selected)
    - Technique catalog and emotional intelligence service

    The technique catalog is loaded eagerly so a broken catalog fails
    startup instead of the first assessment.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting EduAffect API",
        extra={"environment": settings.environment, "debug": settings.debug},
    )

    # =========================================================================
    # Startup
    # =========================================================================

    app.state.redis = None
    repository: EmotionalRepository = InMemoryEmotionalRepository()

    if settings.emotional.store_backend == "redis":
        try:
            client = await init_redis(settings)
            app.state.redis = client
            repository = RedisEmotionalRepository(client)
            logger.info("Redis connection initialized")
        except RedisError as e:
            logger.warning("Failed to initialize Redis, using in-memory store: %s", str(e))

    app.state.emotional_service = build_emotional_service(settings, repository)
    logger.info(
        "Emotional intelligence service ready with %d techniques",
        len(app.state.emotional_service.catalog),
    )

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    if app.state.redis is not None:
        try:
            await close_redis()
            logger.info("Redis connection closed")
        except Exception as e:
            logger.warning("Error closing Redis: %s", str(e))

    logger.info("Shutting down EduAffect API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="EduAffect API",
        description="Emotional state inference and intervention engine for learners",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # =========================================================================
    # Middleware
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
