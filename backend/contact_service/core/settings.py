# contact_service/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    api_title: str = Field(default="Contact API", alias="API_TITLE")
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    # Delivery mode: "console" (dev, log only) or anything else for Resend
    email_service: str = Field(default="console", alias="EMAIL_SERVICE")

    resend_api_key: Optional[str] = Field(default=None, alias="RESEND_API_KEY")
    resend_api_url: str = Field(default="https://api.resend.com/emails", alias="RESEND_API_URL")
    from_email: str = Field(default="noreply@yourdomain.com", alias="FROM_EMAIL")
    to_email: str = Field(default="contact@yourdomain.com", alias="TO_EMAIL")
    email_timeout_seconds: float = Field(default=10.0, alias="EMAIL_TIMEOUT_SECONDS")

    # 5 submissions per client per 15 minutes
    rate_limit_window_seconds: int = Field(default=15 * 60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_requests: int = Field(default=5, alias="RATE_LIMIT_MAX_REQUESTS")

    # "memory" (single instance) or "redis" (shared between instances)
    rate_limit_backend: str = Field(default="memory", alias="RATE_LIMIT_BACKEND")
    rate_limit_max_clients: int = Field(default=10000, alias="RATE_LIMIT_MAX_CLIENTS")
    redis_url: Optional[str] = Field(default=None, alias="REDIS_URL")

settings = Settings()
