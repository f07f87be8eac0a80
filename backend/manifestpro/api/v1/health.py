from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from manifestpro import __version__
from manifestpro.config import settings
from manifestpro.dependencies import get_provider_router
from manifestpro.providers import ProviderRouter, configured_providers
from manifestpro.schemas.health import HealthResponse, ProviderCheckResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    providers = configured_providers(settings)
    return HealthResponse(
        status="healthy" if any(providers.values()) else "degraded",
        providers=providers,
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment,
        version=__version__,
    )


@router.get("/health/providers", response_model=ProviderCheckResponse)
async def provider_check(
    provider_router: ProviderRouter = Depends(get_provider_router),
) -> ProviderCheckResponse:
    """Send a trivial prompt to every configured provider."""
    results = await provider_router.check_connections()
    return ProviderCheckResponse(providers=results, timestamp=datetime.now(timezone.utc))
