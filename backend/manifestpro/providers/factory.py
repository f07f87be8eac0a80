from manifestpro.config import Settings
from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.providers.base import ProviderClient, ProviderId, parse_provider_id
from manifestpro.providers.claude import ClaudeClient
from manifestpro.providers.openai_compat import OpenAICompatibleClient

_OPENAI_COMPATIBLE = {
    ProviderId.GROQ: ("groq_api_key", "groq_base_url", "groq_model", "groq_fast_model"),
    ProviderId.GEMINI: ("gemini_api_key", "gemini_base_url", "gemini_model", "gemini_fast_model"),
    ProviderId.DEEPSEEK: (
        "deepseek_api_key",
        "deepseek_base_url",
        "deepseek_model",
        "deepseek_fast_model",
    ),
}


def _api_key_for(provider_id: ProviderId, settings: Settings) -> str:
    if provider_id == ProviderId.CLAUDE:
        return settings.anthropic_api_key
    return getattr(settings, _OPENAI_COMPATIBLE[provider_id][0])


def configured_providers(settings: Settings) -> dict[str, bool]:
    """Which providers have credentials. No network access."""
    return {p.value: bool(_api_key_for(p, settings).strip()) for p in ProviderId}


def build_provider(provider_id: "ProviderId | str", settings: Settings) -> ProviderClient:
    """Create the client for a provider, failing fast when it has no API key."""
    provider_id = parse_provider_id(provider_id)
    api_key = _api_key_for(provider_id, settings).strip()
    if not api_key:
        raise ManifestError(
            ErrorKind.CONFIGURATION_ERROR,
            f"{provider_id.value.upper()} API key not configured",
        )

    common = dict(
        timeout=settings.provider_timeout_seconds,
        temperature=settings.provider_temperature,
        max_tokens=settings.provider_max_tokens,
        max_tokens_limit=settings.provider_max_tokens_limit,
    )

    if provider_id == ProviderId.CLAUDE:
        return ClaudeClient(
            api_key=api_key,
            model=settings.claude_model,
            fast_model=settings.claude_haiku_model,
            **common,
        )

    _, base_url_attr, model_attr, fast_attr = _OPENAI_COMPATIBLE[provider_id]
    return OpenAICompatibleClient(
        provider_id=provider_id,
        api_key=api_key,
        base_url=getattr(settings, base_url_attr),
        model=getattr(settings, model_attr),
        fast_model=getattr(settings, fast_attr),
        **common,
    )
