"""Application settings using Pydantic Settings"""
from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./zander.db"

    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    AUTH_TOKEN_SECRET: str = "change-me-in-production"
    AUTH_TOKEN_MAX_AGE: int = 60 * 60 * 24

    IMPORT_MAX_ROWS: int = 5000

    # Client side
    API_URL: str = "http://localhost:8000"
    API_TOKEN: str = ""
    API_TIMEOUT_SECONDS: float = 30.0
    PROGRESS_TICK_SECONDS: float = 0.2

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = ["dev", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of: {allowed}")
        return v

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "prod"

    @property
    def log_level_name(self) -> str:
        return self.LOG_LEVEL.upper()

    def validate_secrets_for_production(self) -> None:
        if self.is_production:
            errors: List[str] = []
            if self.AUTH_TOKEN_SECRET == "change-me-in-production":
                errors.append("AUTH_TOKEN_SECRET must be set to a secure value in production")
            if self.DATABASE_URL.startswith("sqlite"):
                errors.append("DATABASE_URL must point to a server database in production")
            if errors:
                raise ValueError("; ".join(errors))


settings = Settings()


def get_settings() -> Settings:
    return settings
