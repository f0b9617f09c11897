# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LLM-facing agent components.

Capabilities build prompts and parse LLM replies; callers own the LLM call.
"""
