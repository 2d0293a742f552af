from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Either a full DSN or the individual parts below
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "users"
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_command_timeout: Optional[float] = None
    create_indexes: bool = False

    api_prefix: str = "/api"
    service_banner: str = "Jungle Challenge"

    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_methods: list[str] = ["GET", "POST", "PATCH", "DELETE"]
    cors_allow_headers: list[str] = ["Content-Type", "Authorization", "Accept"]

    server_host: str = "127.0.0.1"
    server_port: int = 8000

    log_level: str = "INFO"
    log_json: bool = False

    @property
    def dsn(self) -> str:
        """Connection string handed to the pool."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
