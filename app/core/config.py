from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_env: Literal["dev", "staging", "prod"] = "dev"
    app_name: str = "AI Powered Uploads API"
    api_prefix: str = "/api"
    debug: bool = False
    cors_allow_origins: str = "http://localhost:3000"

    log_level: str = "INFO"
    log_json: bool = True

    use_local_endpoint: bool = Field(
        default=False,
        validation_alias=AliasChoices("use_local_endpoint", "use_localstack"),
    )
    local_endpoint_url: str = Field(
        default="http://localhost:4566",
        validation_alias=AliasChoices("local_endpoint_url", "localstack_endpoint"),
    )
    region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("region", "aws_region"),
    )
    aws_connect_timeout: float = 5.0
    aws_read_timeout: float = 30.0
    aws_max_attempts: int = 3

    use_secrets_service: bool = Field(
        default=False,
        validation_alias=AliasChoices("use_secrets_service", "use_secrets_manager"),
    )
    secrets_service_identifier: str = Field(
        default="ai-powered-secrets",
        validation_alias=AliasChoices("secrets_service_identifier", "secrets_manager_name"),
    )

    skip_auth_for_testing: bool = False

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
