"""FastAPI application entrypoint.

This module builds the reading club administration API. Controllers
live in `readingclub.routers` and are intentionally thin: they accept
requests, delegate to services, and return JSON responses.

Route groups:
- /api/auth             admin login and registration
- /api/admin/...        admin-only resources (admins, persons, groups,
                        books, semesters, participations, records,
                        semester-user-books, assignments)
- /api/user             person login, profile and own records
- /health               uptime check

Every failure is answered with `{"success": false, "error": <message>}`.
"""

import json
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .database import create_db_and_tables, engine
from .errors import ServiceError
from .routers import (
    admins,
    assignments,
    auth,
    books,
    groups,
    participations,
    persons,
    records,
    semester_user_books,
    semesters,
    user,
)
from .seed import seed_default_data

app = FastAPI(title="Reading Club Administration API")
logger = logging.getLogger("readingclub.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps a local frontend dev server working without extra config.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()
if settings.SEED_DEFAULT_DATA:
    with Session(engine) as _session:
        seed_default_data(_session)


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return _error(400, "; ".join(parts) or "invalid request")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error path=%s", request.url.path)
    return _error(500, f"An unexpected error occurred: {exc}")


def _request_log_line(request: Request, req_id: str, started: float, **extra) -> str:
    fields = {
        "request_id": req_id,
        "method": request.method,
        "path": request.url.path,
        **extra,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client": request.client.host if request.client else "unknown",
    }
    return json.dumps(fields, ensure_ascii=True)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Tag every response with `X-Request-ID` and log one JSON line per API call."""
    req_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = req_id
    logged = request.url.path.startswith("/api")
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        if logged:
            logger.exception("request_failed %s", _request_log_line(request, req_id, started))
        raise
    response.headers["X-Request-ID"] = req_id
    if logged:
        logger.info("request_done %s", _request_log_line(request, req_id, started, status_code=response.status_code))
    return response


for _module in (auth, admins, persons, groups, books, semesters, participations, records,
                semester_user_books, assignments, user):
    app.include_router(_module.router)


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
