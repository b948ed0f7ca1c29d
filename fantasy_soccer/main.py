# fantasy_soccer/main.py
from __future__ import annotations

import json
import logging
import os
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fantasy_soccer import models  # noqa: F401  (import registers models with Base)

# --- DB bootstrapping: create tables at startup ---
from fantasy_soccer.db import Base, engine

from .logic.rejections import PersistenceError, RejectionReason
from .schemas import OperationResult

# Routers
from .routers import (
    health,
    players,
    roster,
    rules,
    teams,
)

# ---------- App ----------
app = FastAPI(title="Fantasy Soccer Roster API", version="0.1.0")


# Create tables once on app start
@app.on_event("startup")
def _create_tables() -> None:
    Base.metadata.create_all(bind=engine)


# ---------- Minimal structured logging ----------
logging.basicConfig(level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
logger = logging.getLogger("fantasy_soccer")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    duration_ms = (time.perf_counter() - start) * 1000.0
    log_obj = {
        "msg": "request",
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "team_id": request.scope.get("path_params", {}).get("team_id"),
        "status": response.status_code,
        "duration_ms": round(duration_ms, 2),
    }
    logger.info(json.dumps(log_obj, separators=(",", ":")))
    return response


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    # Storage failures outside the engine still answer with the retryable rejection shape.
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    result = OperationResult.rejected(RejectionReason.PERSISTENCE_ERROR)
    return JSONResponse(status_code=503, content={"detail": result.model_dump(mode="json", exclude={"roster"})})


def _include_router_flex(app: FastAPI, module) -> None:
    for attr in ("router", "route"):
        if hasattr(module, attr):
            app.include_router(getattr(module, attr))
            return
    name = getattr(module, "__name__", str(module))
    raise RuntimeError(f"Module {name} does not define `router` or `route`")


# ---------- Include Routers ----------
_include_router_flex(app, health)  # /health
_include_router_flex(app, rules)  # /rules
_include_router_flex(app, players)  # /players
_include_router_flex(app, teams)  # /teams
_include_router_flex(app, roster)  # /roster
