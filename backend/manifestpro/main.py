import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from manifestpro import __version__
from manifestpro.api.router import api_router
from manifestpro.config import settings
from manifestpro.errors import ManifestError
from manifestpro.middleware.logging import RequestLoggingMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
)

logger = logging.getLogger("manifestpro")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize Sentry if DSN is configured
    if settings.sentry_dsn:
        try:
            import sentry_sdk
            sentry_sdk.init(
                dsn=settings.sentry_dsn,
                traces_sample_rate=0.1,
                environment=settings.environment,
            )
            logger.info("Sentry initialized (env=%s)", settings.environment)
        except Exception as e:
            logger.warning("Failed to initialize Sentry: %s", e)

    logger.info("Starting ManifestPro backend (env=%s)", settings.environment)
    yield
    logger.info("Shutting down ManifestPro backend")


app = FastAPI(
    title="ManifestPro - Shipping Manifest Normalization",
    description="AI-assisted normalization of shipping manifests and CEISA customs workbooks",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(ManifestError)
async def manifest_error_handler(request: Request, exc: ManifestError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %r", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)

    body = {"success": False, "error": exc.message, "kind": exc.kind.value}
    if exc.detail and not settings.is_production:
        body["detail"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=body)


app.include_router(api_router, prefix="/api")
