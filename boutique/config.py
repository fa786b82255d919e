# boutique/config.py
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change_this_secret_key"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Server
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    STATIC_DIR: str = "public"

    # Catalog
    PRODUCTS_FILE: str = "products.json"

    # Admin auth
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    TOKEN_TTL_HOURS: float = 2
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "change_this_password"
    ADMIN_EMAIL: str = "admin@example.com"

    # Mail (all four of host/port/user/pass are needed to enable orders)
    MAIL_HOST: Optional[str] = None
    MAIL_PORT: Optional[int] = None
    MAIL_USER: Optional[str] = None
    MAIL_PASS: Optional[str] = None
    MAIL_SECURE: bool = False
    MAIL_TIMEOUT: float = 10.0

    @property
    def mail_configured(self) -> bool:
        return bool(self.MAIL_HOST and self.MAIL_PORT and self.MAIL_USER and self.MAIL_PASS)


@lru_cache
def get_settings() -> Settings:
    return Settings()
