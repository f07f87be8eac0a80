"""Typed failure taxonomy shared by the provider layer and the pipelines."""

import enum


class ErrorKind(str, enum.Enum):
    EMPTY_INPUT = "empty_input"
    CONFIGURATION_ERROR = "configuration_error"
    INVALID_ARGUMENT = "invalid_argument"
    TIMEOUT = "timeout"
    MALFORMED_RESPONSE = "malformed_response"
    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    SERVER_ERROR = "server_error"
    CONNECTION_ERROR = "connection_error"
    ALL_PROVIDERS_FAILED = "all_providers_failed"
    INVALID_JSON = "invalid_json"
    UNEXPECTED_SHAPE = "unexpected_shape"


# Kinds raised by the transport/provider layer. Only these trigger a fallback.
PROVIDER_FAILURE_KINDS = frozenset({
    ErrorKind.TIMEOUT,
    ErrorKind.MALFORMED_RESPONSE,
    ErrorKind.RATE_LIMITED,
    ErrorKind.UNAUTHORIZED,
    ErrorKind.BAD_REQUEST,
    ErrorKind.SERVER_ERROR,
    ErrorKind.CONNECTION_ERROR,
})

DEFAULT_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.EMPTY_INPUT: 400,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.CONFIGURATION_ERROR: 500,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.ALL_PROVIDERS_FAILED: 502,
    ErrorKind.INVALID_JSON: 502,
    ErrorKind.UNEXPECTED_SHAPE: 502,
}


class ManifestError(Exception):
    """Failure raised anywhere in the manifest pipelines.

    ``detail`` carries diagnostics (e.g. an excerpt of a model reply) that
    are shown to API callers outside production.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        detail: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code or DEFAULT_STATUS_CODES.get(kind, 502)

    @property
    def is_provider_failure(self) -> bool:
        return self.kind in PROVIDER_FAILURE_KINDS

    def __repr__(self) -> str:
        return f"ManifestError({self.kind.value}: {self.message})"
