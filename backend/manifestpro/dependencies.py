from manifestpro.config import settings
from manifestpro.customs.pipeline import CustomsPipeline
from manifestpro.manifest.pipeline import NormalizationPipeline
from manifestpro.providers.router import ProviderRouter


def get_provider_router() -> ProviderRouter:
    return ProviderRouter(settings)


def get_normalization_pipeline() -> NormalizationPipeline:
    return NormalizationPipeline(settings)


def get_customs_pipeline() -> CustomsPipeline:
    return CustomsPipeline(settings)
