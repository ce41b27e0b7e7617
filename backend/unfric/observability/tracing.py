"""Span helper that records a unit of work in Opik, or in the log when Opik is off."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from unfric.observability import client as opik_client

logger = logging.getLogger("unfric.tracing")


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Dict[str, Any]]:
    """Trace the wrapped block; the yielded dict can be enriched by the caller."""
    span: Dict[str, Any] = dict(metadata or {})
    if user_id:
        span.setdefault("user_id", user_id)
    if request_id:
        span.setdefault("request_id", request_id)

    client = opik_client.get_opik_client()
    opik_trace = None
    if client is not None:
        opik_trace = client.trace(name=name, input=dict(span), metadata=span, tags=["unfric"])

    start = perf_counter()
    try:
        yield span
    except Exception as exc:
        duration_ms = (perf_counter() - start) * 1000
        logger.warning("span %s failed after %.2fms %s", name, duration_ms, span)
        if opik_trace is not None:
            opik_trace.end(
                metadata={**span, "duration_ms": duration_ms},
                output={"error": type(exc).__name__, "message": str(exc)},
            )
        raise

    duration_ms = (perf_counter() - start) * 1000
    if opik_trace is not None:
        opik_trace.end(metadata={**span, "duration_ms": duration_ms}, output={"status": "ok"})
    else:
        logger.debug("span %s ok in %.2fms %s", name, duration_ms, span)
