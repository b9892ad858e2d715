# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./tienda_vinilos.db"

    FRONTEND_URL: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    # Transactional email (Resend). Emails are skipped when no key is configured.
    RESEND_API_URL: str = "https://api.resend.com"
    RESEND_API_KEY: Optional[str] = None
    EMAIL_FROM: str = "Tienda de Vinilos <no-reply@tiendavinilos.cl>"

    # Pricing rules, amounts in CLP
    FREE_SHIPPING_THRESHOLD: int = 50000
    SHIPPING_FLAT_FEE: int = 5000
    TAX_RATE: float = 0.19

    # Fallback minimum stock for products without their own threshold
    LOW_STOCK_MINIMUM: int = 5

    # Base URL the storefront order client talks to
    API_BASE_URL: str = "http://127.0.0.1:8000"

    # Outbound HTTP calls (email API, storefront order client)
    HTTP_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
