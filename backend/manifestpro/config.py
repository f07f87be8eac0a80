from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    environment: str = "development"
    log_level: str = "INFO"
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000

    # Provider credentials (empty = not configured)
    groq_api_key: str = ""
    gemini_api_key: str = ""
    deepseek_api_key: str = ""
    anthropic_api_key: str = ""

    # Groq
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    groq_fast_model: str = "llama-3.1-8b-instant"

    # Gemini (OpenAI-compatible endpoint)
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    gemini_model: str = "gemini-2.5-flash"
    gemini_fast_model: str = "gemini-2.5-flash-lite"

    # DeepSeek
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    deepseek_model: str = "deepseek-chat"
    deepseek_fast_model: str = "deepseek-chat"

    # Anthropic
    claude_model: str = "claude-sonnet-4-20250514"
    claude_haiku_model: str = "claude-haiku-4-5-20251001"

    # Provider policy
    default_provider: str = "groq"
    hs_primary_provider: str = "groq"
    provider_fallbacks: dict[str, str] = {
        "groq": "gemini",
        "gemini": "groq",
        "deepseek": "gemini",
        "claude": "groq",
    }
    provider_timeout_seconds: float = 60.0
    hs_lookup_timeout_seconds: float = 30.0
    provider_temperature: float = 0.3
    provider_max_tokens: int = 8000
    provider_max_tokens_limit: int = 32000

    # B/L numbering defaults
    bl_start_number: int = 1
    bl_middle_format: str = "TWN/BLW"

    # Sequencing
    renumber_items: bool = True

    # HS code enrichment
    hs_enrichment_enabled: bool = True
    hs_strategy: str = "batch"
    hs_request_delay_seconds: float = 2.0
    hs_description_max_chars: int = 80
    hs_batch_description_max_chars: int = 100
    hs_batch_size: int = 25

    # File storage
    upload_dir: str = "/app/uploads"
    output_dir: str = "/app/outputs"
    max_upload_size_mb: int = 20

    # Allowed file types for upload
    allowed_file_types: set[str] = {"xlsx", "xlsm", "csv"}

    # Sentry (optional)
    sentry_dsn: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


settings = Settings()
