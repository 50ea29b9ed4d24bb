from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings - only define what needs validation."""

    DEBUG: bool = False
    API_PORT: int = 8080
    ENVIRONMENT: str = "development"  # "development", "production", "test"
    LOG_LEVEL: str = "INFO"

    # Storage settings
    LOCAL_STORAGE_PATH: str = "uploads"  # Path for local JSON documents (library, learning paths)
    LIBRARY_STORAGE_LIMIT_BYTES: int = 5 * 1024 * 1024

    # Mind map layout constants, in pixels
    MINDMAP_NODE_WIDTH: float = 180
    MINDMAP_NODE_HEIGHT: float = 80
    MINDMAP_HORIZONTAL_SEPARATION: float = 220
    MINDMAP_VERTICAL_SEPARATION: float = 20
    MINDMAP_CANVAS_INSET: float = 20  # Padding on each side of the canvas

    # AI Configuration
    @property
    def primary_llm_model(self) -> str:
        """Get primary LLM model from environment - required configuration."""
        import os

        model = os.getenv("PRIMARY_LLM_MODEL")
        if not model:
            msg = "PRIMARY_LLM_MODEL environment variable is required"
            raise ValueError(msg)
        return model

    @property
    def ai_request_timeout(self) -> int:
        """Get AI request timeout from environment."""
        import os

        # Summaries of long documents can take a while
        return int(os.getenv("AI_REQUEST_TIMEOUT", "300"))

    @property
    def ai_temperature_default(self) -> float:
        """Get default temperature for AI requests."""
        import os

        return float(os.getenv("AI_TEMPERATURE_DEFAULT", "0.7"))

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="allow",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    if settings.LIBRARY_STORAGE_LIMIT_BYTES <= 0:
        msg = "LIBRARY_STORAGE_LIMIT_BYTES must be positive"
        raise ValueError(msg)
    return settings
