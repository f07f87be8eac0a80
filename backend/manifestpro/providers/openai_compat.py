"""Client for OpenAI-compatible chat-completion endpoints (Groq, Gemini, DeepSeek)."""

import openai

from manifestpro.errors import ErrorKind, ManifestError
from manifestpro.providers.base import SYSTEM_PROMPT, ProviderClient, ProviderId


class OpenAICompatibleClient(ProviderClient):
    sdk = openai

    def __init__(self, provider_id: ProviderId, api_key: str, base_url: str, **kwargs):
        super().__init__(**kwargs)
        self.provider_id = provider_id
        self.base_url = base_url
        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    async def _send(
        self, prompt: str, model: str, temperature: float, max_tokens: int, timeout: float
    ) -> str | None:
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            stream=False,
            timeout=timeout,
        )

        choices = getattr(response, "choices", None)
        if not choices:
            raise ManifestError(
                ErrorKind.MALFORMED_RESPONSE, f"{self.name}: no choices in response"
            )
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raise ManifestError(
                ErrorKind.MALFORMED_RESPONSE, f"{self.name}: no message content in response"
            )
        return content
