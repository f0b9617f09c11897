# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging for EduAffect.

structlog renders colored console lines in development and JSON lines
everywhere else. Work done on behalf of one learner runs inside
learner_context() so every line it logs carries the learner and session
ids.

Example:
    >>> setup_logging(get_settings())
    >>> logger = get_logger(__name__)
    >>> with learner_context("learner-1", "session-1"):
    ...     logger.info("state_assessed", emotion="focus")
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from eduaffect.core.config.settings import Settings

# Chatty dependencies, capped at WARNING
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "LiteLLM", "redis", "asyncio")


def setup_logging(settings: "Settings") -> None:
    """Configure structlog and the standard library root logger.

    Args:
        settings: Application settings (log_level, environment, debug).
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    pretty = settings.is_development or settings.debug

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if pretty:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=sys.stdout, level=log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("eduaffect").setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger named after the calling module."""
    return structlog.get_logger(name)


@contextmanager
def learner_context(learner_id: str, session_id: str | None = None) -> Iterator[None]:
    """Tag structlog lines logged inside the block with learner ids.

    Previously bound values are restored on exit, so nested blocks and
    concurrent tasks keep their own tags.

    Args:
        learner_id: Learner the work is done for.
        session_id: Session of the learner, when known.
    """
    tags = {"learner_id": learner_id}
    if session_id is not None:
        tags["session_id"] = session_id
    with structlog.contextvars.bound_contextvars(**tags):
        yield
