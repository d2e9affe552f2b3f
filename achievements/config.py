import logging
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "school-achievements"
    DATABASE_URL: str = "sqlite:///achievements.db"
    APP_ID: str = "default"

    SECRET_KEY: str = "dev-secret-key-change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    # Shared secret for POST /badges/run; empty disables the endpoint.
    ADMIN_TOKEN: str = ""

    WORKER_COUNT: int = 8
    STUDENT_TIMEOUT_SECONDS: float = 60.0
    # Lock wait (SQLite) or connection-pool wait (other backends), in seconds.
    DB_TIMEOUT_SECONDS: float = 30.0
    TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    def local_zone(self) -> tzinfo:
        """Calendar used to bucket timestamps into days and months."""
        if self.TIMEZONE.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.TIMEZONE)


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
