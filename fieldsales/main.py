"""Main FastAPI application."""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import time
import uuid

import structlog

from fieldsales import calendar_store, leads_store
from fieldsales.config import config
from fieldsales.logging_config import logger
from fieldsales.health import router as health_router
from fieldsales.routers.core import router as core_router
from fieldsales.routers.scheduling import router as scheduling_router
from fieldsales.routers.visits import router as visits_router
from fieldsales.routers.clients import router as clients_router

# Prometheus metrics
api_requests_total = Counter('api_requests_total', 'Total API requests', ['method', 'endpoint', 'status'])
api_request_duration = Histogram('api_request_duration_seconds', 'API request duration')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("application_starting", version="1.0.0")
    logger.info(
        "scheduling_configured",
        office=f"{config.OFFICE_LATITUDE},{config.OFFICE_LONGITUDE}",
        max_distance_km=config.MAX_DISTANCE_KM,
        slots=len(config.TIME_SLOTS),
        daily_cap=config.DAILY_VISIT_CAP,
    )
    logger.info(
        "stores_loaded",
        staff=len(calendar_store.list_staff()),
        leads=len(leads_store.list_leads()),
    )

    yield

    logger.info("application_shutting_down")


app = FastAPI(
    title="Field Sales CRM API",
    description="Visit scheduling and availability engine for field sales teams",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    """Count and time every request, labelled by route template.

    Log lines emitted while the request is handled carry its request_id,
    method and path.
    """
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )
    started = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        structlog.contextvars.clear_contextvars()

    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)
    api_requests_total.labels(method=request.method, endpoint=endpoint, status=response.status_code).inc()
    api_request_duration.observe(time.perf_counter() - started)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(health_router)
app.include_router(core_router)
app.include_router(scheduling_router)
app.include_router(visits_router)
app.include_router(clients_router)


# GET /metrics
# Gets: nothing
# Returns: Prometheus text exposition
# Example:
#   curl http://localhost:8000/metrics
@app.get("/metrics")
async def metrics():
    """Prometheus scrape endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
