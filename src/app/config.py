from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Menu Authorization Admin API"
    debug: bool = False
    database_url: str = "sqlite:///./menu_authz.db"
    db_statement_timeout_ms: int | None = None  # forwarded to the driver as a per-statement deadline

    # Bootstrap identity created/verified on startup
    admin_username: str = "admin"
    admin_password: str = "admin123!@#"
    admin_email: str = "admin@example.com"
    admin_role_name: str = "Administrators"
    admin_role_comment: str = "Super administrator"
    bootstrap_on_startup: bool = True

    default_page_size: int = 10
    max_page_size: int = 100

    jwt_secret: str = "change_this_secret"  # random 32-bytes | run in terminal: openssl rand -hex 32
    jwt_alg: str = "HS256"
    jwt_ttl_seconds: int = 3600
    jwt_refresh_ttl_seconds: int = 86400

    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("debug", "bootstrap_on_startup", mode="before")
    @classmethod
    def _coerce_bool(cls, value):
        if isinstance(value, bool) or value is None:
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"1", "true", "yes", "on"}:
                return True
            if normalized in {"0", "false", "no", "off"}:
                return False
            # Treat common logging level strings as non-debug defaults instead of erroring.
            if normalized in {"warn", "warning", "info", "error", "critical"}:
                return False
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
