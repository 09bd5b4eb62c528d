"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./eventhub.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    MEDIA_ROOT: str = "./media"
    IMAGE_MAX_KILOBYTES: int = 2048
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
