"""Lightweight metric emission through the logging pipeline."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger("unfric.metrics")


def log_metric(name: str, value: float, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a named metric value with optional metadata."""
    logger.info("metric %s=%s %s", name, value, metadata or {})
