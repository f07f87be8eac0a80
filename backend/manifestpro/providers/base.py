"""
Common contract for AI completion providers.

Each client sends a single prompt to one chat-completion endpoint, enforces a
deadline and translates SDK failures into the ``ErrorKind`` taxonomy. Clients
never retry; retrying on another provider is the router's job.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass

from manifestpro.errors import ErrorKind, ManifestError

logger = logging.getLogger("manifestpro.providers")

SYSTEM_PROMPT = (
    "You are a logistics and customs expert specializing in Indonesian shipping "
    "manifest data normalization and HS code classification."
)


class ProviderId(str, enum.Enum):
    GROQ = "groq"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"
    CLAUDE = "claude"


def parse_provider_id(value: "str | ProviderId") -> ProviderId:
    """Resolve a user-supplied model source into a ProviderId."""
    if isinstance(value, ProviderId):
        return value
    try:
        return ProviderId((value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in ProviderId)
        raise ManifestError(
            ErrorKind.CONFIGURATION_ERROR,
            f"Invalid model source: {value!r}. Use one of: {allowed}",
            status_code=400,
        ) from None


@dataclass(frozen=True)
class CompletionOptions:
    """Per-call overrides. ``None`` means "use the provider default"."""

    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    fast: bool = False
    timeout: float | None = None


def classify_sdk_error(sdk, exc: Exception) -> ErrorKind | None:
    """Map an ``openai``/``anthropic`` exception onto an ErrorKind.

    Both SDKs expose the same exception hierarchy, so the module is passed in.
    Returns None for exceptions that did not come from the SDK.
    """
    if isinstance(exc, sdk.APITimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(exc, (sdk.AuthenticationError, sdk.PermissionDeniedError)):
        return ErrorKind.UNAUTHORIZED
    if isinstance(exc, sdk.RateLimitError):
        return ErrorKind.RATE_LIMITED
    if isinstance(exc, sdk.APIStatusError):
        if exc.status_code >= 500:
            return ErrorKind.SERVER_ERROR
        return ErrorKind.BAD_REQUEST
    if isinstance(exc, sdk.APIConnectionError):
        return ErrorKind.CONNECTION_ERROR
    if isinstance(exc, sdk.APIError):
        # Any other SDK failure, e.g. a reply that fails response validation.
        return ErrorKind.SERVER_ERROR
    return None


class ProviderClient:
    """Base class for one AI completion endpoint."""

    provider_id: ProviderId
    sdk = None

    def __init__(
        self,
        model: str,
        fast_model: str,
        timeout: float,
        temperature: float = 0.3,
        max_tokens: int = 8000,
        max_tokens_limit: int = 32000,
    ):
        self.model = model
        self.fast_model = fast_model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_tokens_limit = max_tokens_limit

    @property
    def name(self) -> str:
        return self.provider_id.value

    async def complete(self, prompt: str, options: CompletionOptions | None = None) -> str:
        """Send one prompt and return the non-empty text reply."""
        if not prompt or not prompt.strip():
            raise ManifestError(
                ErrorKind.INVALID_ARGUMENT, "Prompt must not be empty", status_code=400
            )

        opts = options or CompletionOptions()
        model = opts.model or (self.fast_model if opts.fast else self.model)
        temperature = self.temperature if opts.temperature is None else opts.temperature
        max_tokens = max(1, min(opts.max_tokens or self.max_tokens, self.max_tokens_limit))
        timeout = opts.timeout or self.timeout

        logger.debug("Calling %s (model=%s, max_tokens=%d)", self.name, model, max_tokens)

        try:
            text = await asyncio.wait_for(
                self._send(prompt, model, temperature, max_tokens, timeout),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            raise ManifestError(
                ErrorKind.TIMEOUT, f"{self.name}: request timed out after {timeout:g}s"
            ) from None
        except ManifestError:
            raise
        except Exception as e:
            kind = classify_sdk_error(self.sdk, e) if self.sdk is not None else None
            if kind is None:
                raise
            raise ManifestError(kind, f"{self.name}: {kind.value} ({e})") from e

        if not text or not text.strip():
            raise ManifestError(
                ErrorKind.MALFORMED_RESPONSE, f"{self.name}: empty text in response"
            )
        return text.strip()

    async def _send(
        self, prompt: str, model: str, temperature: float, max_tokens: int, timeout: float
    ) -> str | None:
        raise NotImplementedError
