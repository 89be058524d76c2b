from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    SECRET_KEY: str = "change-this-secret"
    SESSION_COOKIE: str = "storefront_session"
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    # header set by the upstream authenticator for signed-in visitors
    AUTH_USER_HEADER: str = "X-Authenticated-User"

    PAYMENT_GATEWAY: str = "mock"  # mock, stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_PUBLISHABLE_KEY: str = ""
    PAYMENT_CURRENCY: str = "cad"
    PAYMENT_DESCRIPTION: str = "Storefront Purchase"
    PAYMENT_TIMEOUT_SECONDS: float = 10.0
    PAYMENT_MOCK_DELAY_MS: int = 200
    PAYMENT_MOCK_FAILURE_RATE: float = 0.0

    SEED_CATALOG: bool = True
    RESET_DB: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
