# inquiry_admin/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    APP_NAME: str = "Inquiry Admin"
    ENV: str = "dev"

    # Session middleware (flash messages)
    SECRET_KEY: str = Field(default="change-me-in-prod")

    # Upstream contact API
    CONTACT_API_BASE_URL: str = "http://127.0.0.1:3000"
    CONTACT_API_TIMEOUT: float = 10.0

    # Where an unauthenticated admin is sent (served by the contact site)
    ADMIN_LOGIN_URL: str = "/admin/login"

    # Search box quiet period
    SEARCH_DEBOUNCE_MS: int = 500

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
