import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api import courses, health, tee_times
from app.config import settings
from app.providers.http_client import HttpClient
from app.services.cache import AggregationCache
from app.services.course_registry import build_default_registry
from app.services.executor import ResilientExecutor
from app.services.orchestrator import TeeTimeOrchestrator

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    http = HttpClient()
    registry = build_default_registry(http)
    cache = AggregationCache()
    app.state.registry = registry
    app.state.orchestrator = TeeTimeOrchestrator(registry, ResilientExecutor(), cache)
    logger.info(f"Registered {len(registry)} course(s): {', '.join(registry.slugs)}")

    yield

    await registry.close()
    await http.close()


app = FastAPI(
    title="TeeTimes",
    description="Aggregated golf tee time availability across booking backends",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error in {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(tee_times.router)
app.include_router(courses.router)
