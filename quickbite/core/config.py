"""Application configuration."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./quickbite.db"

    # Restaurant
    restaurant_name: str = "QuickBite"
    currency: str = "RM"

    # OpenAI (image tagging for chat uploads)
    openai_api_key: Optional[str] = None
    vision_model: str = "gpt-4o-mini"

    # Accounts
    admin_email: str = "admin@quickbite.local"
    admin_password: str = "admin"
    session_ttl_hours: int = 24
    cart_ttl_hours: int = 48

    # Chat
    recent_orders_limit: int = 3

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
