from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Database - PostgreSQL for production, SQLite for development
    database_url: str = Field(
        default="sqlite:///./stayadmin.db",
        alias="DATABASE_URL"
    )

    # Security
    secret_key: str = Field(default="dev-secret-key-at-least-32-characters-long-for-development", alias="SECRET_KEY")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12

    # Operator seeded on first start
    admin_username: str = Field(default="admin", alias="ADMIN_USERNAME")
    admin_password: str = Field(default="Admin123!", alias="ADMIN_PASSWORD")

    # CORS - Frontend URLs from environment (comma-separated)
    allowed_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        alias="ALLOWED_ORIGINS"
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    # ==============================================
    # Payments (webhook from the payment processor)
    # ==============================================
    payment_webhook_secret: str = Field(default="", alias="PAYMENT_WEBHOOK_SECRET")
    # Max age of a signed webhook timestamp (seconds)
    payment_webhook_tolerance: int = Field(default=300, alias="PAYMENT_WEBHOOK_TOLERANCE")

    # Function endpoint that fans out chat/email notifications
    notification_function_url: str = Field(default="", alias="NOTIFICATION_FUNCTION_URL")
    notification_timeout_seconds: int = Field(default=10, alias="NOTIFICATION_TIMEOUT_SECONDS")

    # ==============================================
    # Admin client
    # ==============================================
    api_url: str = Field(default="http://localhost:8000", alias="STAYADMIN_API_URL")
    emergency_state_file: str = Field(default=".stayadmin-emergency.json", alias="EMERGENCY_STATE_FILE")

    # Farthest selectable month for calendar edits
    selection_horizon_months: int = Field(default=16, alias="SELECTION_HORIZON_MONTHS")
    max_nightly_price: int = Field(default=999, alias="MAX_NIGHTLY_PRICE")

    @field_validator('secret_key')
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate SECRET_KEY is strong enough"""
        if not v:
            raise ValueError("SECRET_KEY is required and cannot be empty")
        if len(v) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse allowed origins from comma-separated string.
        Returns a list suitable for CORSMiddleware.
        """
        origins = []
        for origin in self.allowed_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin and origin not in origins:
                origins.append(origin)

        return origins if origins else ["http://localhost:5173"]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Initialize settings on module load
settings = get_settings()
