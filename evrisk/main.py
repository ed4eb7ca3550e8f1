"""FastAPI app entry point for the EV-Risk Buy Confidence API."""

import time
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from evrisk.api.deps import get_reference, limiter
from evrisk.api.routes import router
from evrisk.core.config import get_settings
from evrisk.core.logging import log_request, log_response, logger, setup_logging
from evrisk.services.reference_data import ReferenceData, get_reference_data


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - load reference data before serving.

    A malformed reference file raises here and aborts startup.
    """
    logger.info("Starting EV-Risk API...")
    get_reference_data()
    yield
    logger.info("Shutting down...")


settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(
    title="EV-Risk API",
    description="Buy Confidence scoring for used electric vehicles",
    version="1.0.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    log_request(request.method, request.url.path)

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    log_response(request.method, request.url.path, response.status_code, duration_ms)

    return response


# Routes
app.include_router(router, prefix="/api")


@app.get("/health")
async def health(
    reference: Annotated[ReferenceData, Depends(get_reference)],
) -> dict[str, Any]:
    return {"status": "healthy", "reference_data": reference.table_sizes()}
