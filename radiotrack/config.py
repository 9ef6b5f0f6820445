import logging
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

_DEFAULT_DATA_DIR = "data"


class Settings(BaseSettings):
    APP_ENV: str = "development"
    DATA_DIR: str = _DEFAULT_DATA_DIR
    STORAGE_BACKEND: str = "json"  # json/sql
    DATABASE_URL: str = "sqlite:///./data/radiotrack.db"
    PROFILE_IMAGES_DIR: str = "data/profile-images"
    USER_IMPORT_DIR: str = "crit2024"
    DEFAULT_INVENTORY_SIZE: int = 64
    DEFAULT_RADIO_NAME: str = "ICOM"

    class Config:
        env_file = ".env"


settings = Settings()

if settings.STORAGE_BACKEND not in ("json", "sql"):
    raise RuntimeError(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}', expected 'json' or 'sql'.")

if settings.APP_ENV == "production" and settings.STORAGE_BACKEND == "json" and settings.DATA_DIR == _DEFAULT_DATA_DIR:
    logger.warning("⚠️  DATA_DIR has the default value, records are stored relative to the working directory.")
