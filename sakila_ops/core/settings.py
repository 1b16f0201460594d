from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DB_URL: str = "mysql://root@localhost:3306/sakila"
    SQL_DIR: str = str(PACKAGE_DIR / "sql")
    DEFAULT_PAGE_SIZE: int = 20
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

settings = Settings()
