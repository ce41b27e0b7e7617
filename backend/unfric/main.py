"""FastAPI application exposing the task engine."""
from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import FastAPI, Request

from unfric.api.routes import schedule, task
from unfric.core.config import settings
from unfric.core.logging import configure_logging
from unfric.observability.client import init_opik

configure_logging(log_level=settings.log_level)
init_opik()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)


@app.middleware("http")
async def attach_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(task.router)
app.include_router(schedule.router)

logger.info("%s ready (tz=%s, tick=%ss)", settings.app_name, settings.timezone, settings.clock_tick_seconds)
