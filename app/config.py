# app/config.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from pathlib import Path
from typing import List, Optional
from functools import lru_cache

class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    DATA_DIR: Path = Path(".")  # where the site reviews document lives
    REVIEWS_FILE: str = "site-reviews.json"
    PUBLIC_DIR: Path = Path("public")
    FEED_LIMIT: int = 10

    # Google Places (v1). Leave unset to serve site reviews only.
    GOOGLE_PLACE_ID: Optional[str] = None
    GOOGLE_API_KEY: Optional[str] = None
    GOOGLE_PLACES_URL: str = "https://places.googleapis.com/v1/places"
    GOOGLE_TIMEOUT_SECONDS: float = 5.0

    # comma separated; empty means any origin
    CORS_ORIGINS: str = ""

    # Example .env:
    # GOOGLE_PLACE_ID=ChIJ...
    # GOOGLE_API_KEY=AIza...
    # DATA_DIR=./data

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def reviews_path(self) -> Path:
        return Path(self.DATA_DIR) / self.REVIEWS_FILE

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()

settings = get_settings()
