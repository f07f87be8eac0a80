from manifestpro.providers.base import CompletionOptions, ProviderClient, ProviderId, parse_provider_id
from manifestpro.providers.factory import build_provider, configured_providers
from manifestpro.providers.router import ProviderReply, ProviderRouter

__all__ = [
    "CompletionOptions",
    "ProviderClient",
    "ProviderId",
    "ProviderReply",
    "ProviderRouter",
    "build_provider",
    "configured_providers",
    "parse_provider_id",
]
