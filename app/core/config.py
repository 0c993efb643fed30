"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str
    CANDIDATES_TABLE: str = "candidates"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Listing
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 1000

    # Analytics
    RECENT_ACTIVITY_DAYS: int = 30
    TOP_ROLES_LIMIT: int = 10

    # Rows per request when the store scans the whole table
    STORE_BATCH_SIZE: int = 1000

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins(self) -> list[str]:
        """``ALLOWED_ORIGINS`` split on commas; ``*`` allows any origin."""
        raw = self.ALLOWED_ORIGINS.strip()
        if raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


settings = Settings()  # type: ignore[call-arg]
