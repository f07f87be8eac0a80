"""Client for the Anthropic Messages API."""

import anthropic

from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.providers.base import SYSTEM_PROMPT, ProviderClient, ProviderId


class ClaudeClient(ProviderClient):
    provider_id = ProviderId.CLAUDE
    sdk = anthropic

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key, timeout=self.timeout, max_retries=0
        )

    async def _send(
        self, prompt: str, model: str, temperature: float, max_tokens: int, timeout: float
    ) -> str | None:
        message = await self.client.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
            timeout=timeout,
        )

        blocks = getattr(message, "content", None) or []
        texts = [b.text for b in blocks if isinstance(getattr(b, "text", None), str)]
        if not texts:
            raise ManifestError(
                ErrorKind.MALFORMED_RESPONSE, f"{self.name}: no text block in response"
            )
        return "".join(texts)
