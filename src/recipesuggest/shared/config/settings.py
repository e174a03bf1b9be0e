from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # General
    LOG_LEVEL: str = Field(default="INFO", description="Application log level")
    BIND: str = Field(default="0.0.0.0:8076", description="API bind address")

    # CORS
    CORS_ALLOW_ORIGINS: str = Field(default="*", description="Comma-separated list of allowed origins")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=False, description="Allow credentials in CORS")
    CORS_ALLOW_METHODS: str = Field(default="POST,OPTIONS,GET", description="Allowed CORS methods")
    CORS_ALLOW_HEADERS: str = Field(
        default="authorization,x-client-info,apikey,content-type",
        description="Allowed CORS headers",
    )

    # LLM
    AI_GATEWAY_API_KEY: str = Field(
        default="",
        description="Chat completion gateway API key",
        validation_alias=AliasChoices("AI_GATEWAY_API_KEY", "LOVABLE_API_KEY"),
    )
    AI_GATEWAY_BASE_URL: str = Field(
        default="https://ai.gateway.lovable.dev/v1", description="Chat completion gateway base URL"
    )
    SUGGESTION_MODEL: str = Field(default="google/gemini-3-flash-preview", description="Suggestion model ID")
    TEMPERATURE: float = Field(default=0.7, description="Temperature")
    LLM_REQUEST_TIMEOUT: float = Field(default=30.0, description="Deadline for one LLM request (seconds)")

    # Backend store
    STORE_URL: str = Field(
        default="http://localhost:54321",
        validation_alias=AliasChoices("STORE_URL", "SUPABASE_URL"),
        description="Supabase project URL",
    )
    STORE_ANON_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("STORE_ANON_KEY", "SUPABASE_ANON_KEY"),
        description="Supabase publishable (anon) key",
    )
    STORE_REQUEST_TIMEOUT: float = Field(default=15.0, description="Store request timeout (seconds)")

    # Client
    SUGGEST_ENDPOINT_URL: str = Field(
        default="http://127.0.0.1:8076/v1/ai-recipe-suggest", description="Suggestion endpoint used by clients"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


def get_settings() -> Settings:
    """
    Build settings from the current environment. Used where values must be read per request.
    """
    return Settings()


settings = get_settings()
