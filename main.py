"""
HTTP surface for the SMS media pipeline.

Replays queue-shaped batches through the same processor the queue lambda
uses, and exposes probes for the container platform.

Run locally: uvicorn main:app --port 8000
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import Config, configure_logging
from infra.bootstrap import bootstrap_pipeline
from webhook import batch_router

configure_logging()
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report configuration gaps at startup; the pipeline itself is built lazily."""
    if Config.validate():
        logger.info(
            f"SMS media pipeline ready ({Config.ENVIRONMENT}, "
            f"publish backend: {Config.PUBLISH_BACKEND})"
        )
    else:
        logger.warning("SMS media pipeline started with incomplete configuration")

    yield

    logger.info("SMS media pipeline stopped")


app = FastAPI(
    title="SMS Media Pipeline API",
    description="Verifies queued SMS webhooks and fans out their media",
    version=API_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def time_requests(request: Request, call_next):
    """Log method, path, status and latency; unhandled errors become 500s."""
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Unhandled error on {request.url.path}: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
    )
    return response


app.include_router(batch_router)


@app.get("/health/live")
async def liveness():
    return {"status": "alive"}


@app.get("/health/ready")
async def readiness():
    """Ready once the signing secret and both topics are configured."""
    missing = Config.missing()
    if missing:
        return {"status": "not_ready", "missing": missing}
    return {"status": "ready", "pipeline": repr(bootstrap_pipeline())}


@app.get("/")
async def index():
    return {
        "name": "SMS Media Pipeline API",
        "version": API_VERSION,
        "endpoints": {
            "batch": "POST /webhook/batch",
            "batch_health": "GET /webhook/batch/health",
            "liveness": "GET /health/live",
            "readiness": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )
