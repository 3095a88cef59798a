"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful maintenance copilot. You intake requests from luxury hotel guests "
    "for the hotel maintenance team.\n"
    "You should ensure you have all the necessary information to assist with maintenance "
    "requests.\n"
    "You should ensure you have permission to perform additional actions, such as saving "
    "the request to the database. Please ask the user to confirm before saving.\n"
    "You should inform the user that you have saved the request and maintenance will "
    "address them shortly."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "maintenance-copilot"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = Field(
        ...,
        description="Async SQLAlchemy connection string (asyncpg or aiosqlite driver)",
    )
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30

    # Embedding Service
    EMBEDDING_ENDPOINT_URL: str = Field(
        ...,
        description="URL of the embedding service endpoint",
    )
    EMBEDDING_API_KEY: str | None = None
    EMBEDDING_MODEL: str = "text-embedding-ada-002"
    EMBEDDING_DIMENSION: int = 1536
    EMBEDDING_TIMEOUT: float = 30.0
    EMBEDDING_MAX_RETRIES: int = 3

    # Embedding Cache Configuration
    ENABLE_EMBEDDING_CACHE: bool = True
    EMBEDDING_CACHE_SIZE: int = 1000

    # Chat Completion Service
    CHAT_COMPLETION_URL: str = Field(
        ...,
        description="URL of an OpenAI-compatible chat completions endpoint",
    )
    CHAT_API_KEY: str | None = None
    CHAT_MODEL: str = "gpt-4o"
    CHAT_TIMEOUT: float = 60.0
    CHAT_TEMPERATURE: float = 0.2
    # "api-key" for Azure OpenAI deployments, "Authorization" for bearer tokens
    API_KEY_HEADER: str = "Authorization"

    # Agent
    SYSTEM_PROMPT: str = DEFAULT_SYSTEM_PROMPT
    AGENT_MAX_TOOL_ROUNDS: int = 5
    SESSION_TTL_SECONDS: int = 3600
    SESSION_MAX_COUNT: int = 10000

    # Search Configuration
    DEFAULT_SIMILARITY_THRESHOLD: float = 0.8
    DEFAULT_MAX_RESULTS: int = 0  # 0 = every result above the threshold

    # Security
    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8501"],
        description="Allowed CORS origins"
    )

    # OpenTelemetry Configuration
    OTEL_ENABLED: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None
    OTEL_SERVICE_NAME: str = "maintenance-copilot"
    OTEL_SERVICE_VERSION: str = "1.0.0"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v) -> list[str]:
        """Parse CORS origins from list or comma-separated string."""
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return [str(origin).rstrip("/") for origin in v if origin]
        return []

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper

    @field_validator("DEFAULT_SIMILARITY_THRESHOLD")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Cosine similarity lives in [-1, 1]."""
        if not -1 <= v <= 1:
            raise ValueError("DEFAULT_SIMILARITY_THRESHOLD must be between -1 and 1")
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v:
            raise ValueError("DATABASE_URL is required")
        if not v.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
            raise ValueError(
                "DATABASE_URL must use an async driver "
                "(postgresql+asyncpg:// or sqlite+aiosqlite://)"
            )
        return v

    @field_validator("EMBEDDING_ENDPOINT_URL", "CHAT_COMPLETION_URL")
    @classmethod
    def validate_service_url(cls, v: str) -> str:
        """Validate external service URL format."""
        if not v:
            raise ValueError("Service URL is required")
        if not v.startswith(("http://", "https://")):
            raise ValueError("Service URL must be a valid HTTP(S) URL")
        return v.rstrip("/")

    @field_validator("DB_POOL_SIZE", "DB_MAX_OVERFLOW", "DB_POOL_TIMEOUT")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Validate positive integer values."""
        if v < 0:
            raise ValueError("Value must be a non-negative integer")
        return v

    @field_validator("EMBEDDING_DIMENSION")
    @classmethod
    def validate_embedding_dimension(cls, v: int) -> int:
        """Validate embedding dimension is reasonable."""
        if v < 1 or v > 10000:
            raise ValueError("EMBEDDING_DIMENSION must be between 1 and 10000")
        return v

    @field_validator("EMBEDDING_TIMEOUT", "CHAT_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout values are positive."""
        if v <= 0:
            raise ValueError("Timeout must be a positive number")
        if v > 600:
            raise ValueError("Timeout should not exceed 600 seconds")
        return v

    @field_validator("AGENT_MAX_TOOL_ROUNDS")
    @classmethod
    def validate_max_tool_rounds(cls, v: int) -> int:
        """Validate the tool loop cap is reasonable."""
        if v < 1:
            raise ValueError("AGENT_MAX_TOOL_ROUNDS must be at least 1")
        if v > 50:
            raise ValueError("AGENT_MAX_TOOL_ROUNDS should not exceed 50")
        return v

    @field_validator("EMBEDDING_MAX_RETRIES")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        """At least one attempt is always made."""
        if v < 1:
            raise ValueError("EMBEDDING_MAX_RETRIES must be at least 1")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
