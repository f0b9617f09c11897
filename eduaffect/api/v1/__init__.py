# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    emotional: Emotional state assessment, profile, intervention and
        insight endpoints.
"""

from fastapi import APIRouter

from eduaffect.api.v1 import emotional

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(emotional.router, prefix="/emotional", tags=["Emotional Intelligence"])

__all__ = ["router"]
