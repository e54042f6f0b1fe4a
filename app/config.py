# app/config.py
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    secret_key: str
    env: Literal["dev", "stage", "prod"]
    debug: bool = False
    log_level: str = "INFO"
    access_log: bool = True
    sql_echo: bool = False
    auto_init_db: bool = True

    # Bearer session lifetime for staff logins
    session_ttl_hours: int = 24

    # Rankings cache freshness windows
    rankings_lifetime_ttl_seconds: int = 10 * 60
    rankings_season_ttl_seconds: int = 3 * 60
    rankings_date_ttl_seconds: int = 15 * 60
    rankings_form_limit: int = 5

    @property
    def is_dev(self) -> bool:
        return self.env == "dev" or self.debug is True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
