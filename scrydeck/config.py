from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "scrydeck"
    debug: bool = False

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "scrydeck/0.1"

    # Scryfall asks clients to stay under 10 requests per second
    requests_per_second: float = 10.0
    request_timeout: float = 30.0


settings = Settings()


# =============================================================================
# CATALOG LIMITS
# =============================================================================

# The /cards/collection endpoint accepts at most 75 identifiers per request
MAX_COLLECTION_BATCH_SIZE = 75
