"""
Primary-then-secondary provider routing.

The primary provider is called once. Only when it fails with a
transport/provider error kind is the configured secondary called, once.
Calls are strictly sequential; providers are never raced.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable

from manifestpro.config import Settings
from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.providers.base import (
    CompletionOptions,
    ProviderClient,
    ProviderId,
    parse_provider_id,
)
from manifestpro.providers.factory import build_provider, configured_providers

logger = logging.getLogger("manifestpro.router")


@dataclass(frozen=True)
class ProviderReply:
    text: str
    provider: ProviderId
    fallback_from: ProviderId | None = None

    @property
    def used_fallback(self) -> bool:
        return self.fallback_from is not None


class ProviderRouter:
    """Request-scoped router. Clients are created lazily and cached per instance."""

    def __init__(
        self,
        settings: Settings,
        factory: Callable[[ProviderId, Settings], ProviderClient] = build_provider,
    ):
        self.settings = settings
        self._factory = factory
        self._clients: dict[ProviderId, ProviderClient] = {}

    def client_for(self, provider_id: ProviderId) -> ProviderClient:
        if provider_id not in self._clients:
            self._clients[provider_id] = self._factory(provider_id, self.settings)
        return self._clients[provider_id]

    def secondary_for(self, primary: ProviderId) -> ProviderId | None:
        secondary = self.settings.provider_fallbacks.get(primary.value)
        if not secondary:
            return None
        secondary_id = parse_provider_id(secondary)
        return None if secondary_id == primary else secondary_id

    async def call_ai(
        self,
        primary: "ProviderId | str",
        prompt: str,
        options: CompletionOptions | None = None,
    ) -> ProviderReply:
        """Call ``primary``; fall back to its secondary on a provider failure.

        Raises:
            ManifestError: CONFIGURATION_ERROR for a bad selector or missing
                primary credentials, the primary's own error for non-provider
                failures, or ALL_PROVIDERS_FAILED when both attempts fail.
        """
        primary_id = parse_provider_id(primary)
        client = self.client_for(primary_id)

        try:
            text = await client.complete(prompt, options)
            logger.info("%s response received", primary_id.value)
            return ProviderReply(text=text, provider=primary_id)
        except ManifestError as e:
            if not e.is_provider_failure:
                raise
            primary_error = e

        logger.warning(
            "%s failed (%s): %s",
            primary_id.value,
            primary_error.kind.value,
            primary_error.message,
        )
        errors = [f"{primary_id.value}: {primary_error.message}"]

        secondary_id = self.secondary_for(primary_id)
        if secondary_id is None:
            raise ManifestError(
                ErrorKind.ALL_PROVIDERS_FAILED,
                "All AI providers failed:\n" + "\n".join(errors),
            ) from primary_error

        # A model override names a primary-provider model; the secondary uses its own.
        secondary_options = replace(options, model=None) if options else None

        try:
            secondary = self.client_for(secondary_id)
            text = await secondary.complete(prompt, secondary_options)
        except ManifestError as e:
            logger.warning("%s failed (%s): %s", secondary_id.value, e.kind.value, e.message)
            errors.append(f"{secondary_id.value}: {e.message}")
            raise ManifestError(
                ErrorKind.ALL_PROVIDERS_FAILED,
                "All AI providers failed:\n" + "\n".join(errors),
            ) from e

        logger.info("%s response received (fallback)", secondary_id.value)
        return ProviderReply(text=text, provider=secondary_id, fallback_from=primary_id)

    async def check_connections(self) -> dict[str, bool]:
        """Ping every configured provider with a trivial prompt."""
        results: dict[str, bool] = {}
        for name, configured in configured_providers(self.settings).items():
            if not configured:
                results[name] = False
                continue
            try:
                reply = await self.client_for(ProviderId(name)).complete(
                    'Respond with "OK"', CompletionOptions(fast=True, max_tokens=10)
                )
                results[name] = "ok" in reply.lower()
            except ManifestError as e:
                logger.error("%s connection test failed: %s", name, e.message)
                results[name] = False
        return results
