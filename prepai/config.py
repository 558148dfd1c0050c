from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Safe defaults for local dev + CI tests
    environment: str = "development"
    log_level: str = "INFO"

    # store
    database_url: str = "sqlite:///./data"
    db_name: str = "prepai"

    # generative AI
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    ai_timeout_seconds: float = 60.0

    # deck rules
    max_decks: int = 15
    cards_per_deck: int = 10

    # google oauth + sessions
    google_client_id: str = ""
    google_client_secret: str = ""
    session_secret: str = "dev-secret-change-me"
    session_algorithm: str = "HS256"
    session_max_age_days: int = 30

    frontend_url: str = "http://localhost:5173"
    backend_url: str = "http://localhost:5000"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def sqlalchemy_url(self) -> str:
        """Connection string with the logical store name appended."""
        base = self.database_url.rstrip("/")
        if base.startswith("sqlite"):
            return f"{base}/{self.db_name}.db"
        return f"{base}/{self.db_name}"

    @property
    def oauth_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
