from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./retailpos.db"
    SQL_ECHO: bool = False
    SECRET_KEY: str = "dev-insecure-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Login throttling, per client IP
    LOGIN_RATE_LIMIT_ATTEMPTS: int = 5
    LOGIN_RATE_LIMIT_WINDOW_SECONDS: int = 60

    # Sale commit retries on lock timeouts / deadlocks
    SALE_COMMIT_MAX_ATTEMPTS: int = 3
    SALE_COMMIT_RETRY_BACKOFF_SECONDS: float = 0.05

    # When False an unknown customer_id is sold to as a walk-in (non-member)
    REJECT_UNKNOWN_CUSTOMER: bool = False

    PASSWORD_MIN_LENGTH: int = 8

    LOG_LEVEL: str = "INFO"


settings = Settings()
