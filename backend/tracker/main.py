"""FastAPI application entrypoint.

This module assembles the semester tracker API: it configures logging,
CORS and the request-context middleware, registers the central error
handlers and mounts one router per resource. Routers are thin: they
parse requests, delegate to services and wrap results in the
`{"message", "data"}` envelope.

Endpoints:
- GET /health
- /auth       register, login, list, delete
- /semesters  CRUD, scoped to the authenticated user
- /subjects   CRUD within a semester
- /grades     CRUD within a subject
"""

import json
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response

from .config import settings
from .database import create_db_and_tables
from .handlers import register_error_handlers
from .routers import auth, grades, health, semesters, subjects

logger = logging.getLogger("tracker.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if not settings.APIKEY:
    logger.warning("APIKEY is not set; every request that requires an API key will be rejected")

app = FastAPI(title="Semester Tracker API")

# Wide-open CORS keeps local frontends working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_error_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(semesters.router)
app.include_router(subjects.router)
app.include_router(grades.router)

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
                "client": request.client.host if request.client else "unknown",
            },
            ensure_ascii=True,
        ),
    )
    return response
