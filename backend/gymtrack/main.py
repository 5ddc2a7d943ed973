# gymtrack/main.py
import time
import logging
import uuid
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from gymtrack.adapters import SqlExerciseCatalog, SqlSubmissionBackend
from gymtrack.db import SessionLocal
from gymtrack.engine import EngineRegistry
from gymtrack.errors import EngineError, LockConflictError, ValidationError
from gymtrack.routers.records import router as records_router
from gymtrack.routers.routine_sessions import router as sessions_router
from gymtrack.settings import get_settings
from gymtrack.store import SqlSessionStore

log = logging.getLogger("uvicorn")
settings = get_settings()

app = FastAPI(
    title="Gymtrack Session API",
    openapi_tags=[
        {"name": "sessions", "description": "Routine-day progress and completion"},
        {"name": "records", "description": "Finished session history"},
    ],
)

app.state.registry = EngineRegistry(
    store=SqlSessionStore(SessionLocal),
    catalog=SqlExerciseCatalog(SessionLocal),
    backend=SqlSubmissionBackend(SessionLocal),
)


# CORS (relax for local dev; tighten origins in prod via env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS.split(","),
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.exception_handler(LockConflictError)
async def lock_conflict_handler(request: Request, exc: LockConflictError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": str(exc),
            "conflicting_day": exc.conflicting_day,
            "requested_day": exc.requested_day,
        },
    )

@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "error": type(exc).__name__},
    )

@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

@app.get("/")
def root():
    return {"ok": True, "name": "Gymtrack Session API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(sessions_router)
app.include_router(records_router)
