import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_ENV: str = "development"
    DATABASE_URL: str = "sqlite:///./data/assetledger.db"
    LOG_LEVEL: str = "INFO"
    MAX_ASSETS: int = 10000
    MAX_EMPLOYEES: int = 5000
    RECENT_FEED_SIZE: int = 5

    class Config:
        env_file = ".env"


settings = Settings()

if settings.APP_ENV == "production" and settings.DATABASE_URL.startswith("sqlite"):
    logger.warning("DATABASE_URL points at SQLite in production; set it in .env")
