from typing import Literal
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Basic configuration ---
    APP_NAME: str = "generic-dao"
    APP_ENV: str = "development"  # development, production, testing
    DEBUG: bool = False

    # --- Database (SQLModel over SQLAlchemy asyncio) ---
    DB_DRIVER: Literal["sqlite", "mysql"] = "sqlite"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_NAME: str = "app_db"
    DB_PATH: str = "app.db"  # sqlite only; ":memory:" for an in-memory database
    DB_ECHO: bool = False
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL(self) -> str:
        # Build async connection URL for the configured driver
        if self.DB_DRIVER == "sqlite":
            return f"sqlite+aiosqlite:///{self.DB_PATH}"
        safe_password = quote_plus(self.DB_PASSWORD)
        return f"mysql+aiomysql://{self.DB_USER}:{safe_password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # --- Logging ---
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False

    # --- Pydantic ---
    # Load env from project root .env; priority: env vars > .env > defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )


# Singleton settings instance
settings = Settings()
