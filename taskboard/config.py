from functools import lru_cache

from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()

class Settings(BaseSettings):
    # Database
    DB_HOST: str = "database"
    DB_PORT: int = 5432
    DB_USER: str = "appuser"
    DB_PASSWORD: str = "apppassword"
    DB_NAME: str = "myapp"
    DATABASE_URL: str | None = None
    DB_CREATE_TABLES: bool = True
    # Serializes table creation across the workers on one host
    SCHEMA_LOCK_FILE: str = "/tmp/taskboard_schema.lock"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    CORS_ORIGIN_REGEX: str = "https?://.*"

    LOG_LEVEL: str = "INFO"
    APP_VERSION: str = "1.0.0"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def sqlalchemy_url(self) -> str:
        # Ensure we use the async driver
        if self.DATABASE_URL:
            return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")
        return URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
