"""FastAPI application entrypoint.

Responsibilities kept minimal:
  * App / lifespan initialization (logging, schema)
  * Router registration
  * Cross-cutting concerns: request logging context, metrics middleware & exception handlers
"""

from contextlib import asynccontextmanager
import re
import uuid
import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .config import get_cors_origins, load_dotenv_if_enabled
from .logging_config import setup_logging

load_dotenv_if_enabled()

from .api.tasks import router as tasks_router  # noqa: E402
from .db import models  # noqa: E402,F401 register models before create_all
from .db.session import engine, Base  # noqa: E402
from .domain.catalog import DEFAULT_CATALOG  # noqa: E402
from .errors import BaseAppException  # noqa: E402

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - simple startup path
    """Configure logging and create the schema (idempotent)."""
    setup_logging()
    Base.metadata.create_all(bind=engine)
    log.info(
        "workforce_started",
        database=engine.url.render_as_string(hide_password=True),
        reference_types=[r.value for r in DEFAULT_CATALOG.reference_types()],
    )
    yield


app = FastAPI(title="Workforce Task Management API", version="0.1.0", lifespan=lifespan)

# --- Metrics setup ---
REQUEST_COUNT = Counter(
    "workforce_requests_total", "Total HTTP requests", ["method", "path", "status"]
)
REQUEST_LATENCY = Histogram(
    "workforce_request_latency_seconds", "Latency of HTTP requests", ["method", "path"]
)

# --- CORS (for local frontend dev) ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tasks_router)

_TASK_ID_SEGMENT = re.compile(r"^/task-mgmt/\d+")


def path_label(path: str) -> str:
    """Collapse task ids so metrics labels stay bounded."""
    return _TASK_ID_SEGMENT.sub("/task-mgmt/:id", path)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    method = request.method
    label = path_label(request.url.path)
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=request.url.path)
    with REQUEST_LATENCY.labels(method=method, path=label).time():
        response: Response = await call_next(request)
    REQUEST_COUNT.labels(method=method, path=label, status=str(response.status_code)).inc()
    log.info("request_completed", status_code=response.status_code)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.exception_handler(BaseAppException)
async def app_exception_handler(request: Request, exc: BaseAppException):
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_body(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):  # pragma: no cover
    log.exception("unhandled_exception")
    return JSONResponse(
        status_code=500,
        content={"detail": {"code": "INTERNAL_ERROR", "message": "unexpected error"}},
    )


@app.get("/healthz")
async def health():
    return {"status": "ok"}
