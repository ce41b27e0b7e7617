"""Opik client bootstrap; tracing stays log-only while Opik is disabled."""
from __future__ import annotations

import logging
from typing import Optional

import opik

from unfric.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[opik.Opik] = None
_initialized = False


def init_opik() -> Optional[opik.Opik]:
    """Create the shared Opik client once when OPIK_ENABLED is set."""
    global _client, _initialized
    if _initialized:
        return _client
    _initialized = True

    if not settings.opik_enabled:
        logger.info("Opik tracing disabled")
        return None

    try:
        _client = opik.Opik(project_name=settings.opik_project, api_key=settings.opik_api_key)
    except Exception as exc:
        logger.warning("Opik client unavailable, spans will only be logged: %s", exc)
        _client = None
        return None

    logger.info("Opik tracing enabled (project=%s)", settings.opik_project)
    return _client


def get_opik_client() -> Optional[opik.Opik]:
    """Return the shared client, or None when tracing is disabled."""
    return init_opik()
