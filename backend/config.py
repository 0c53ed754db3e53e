# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./database_restaurant.db"

    FRONTEND_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Checkout
    DELIVERY_FEE: float = 3.99
    WHATSAPP_NUMBER: str = "23057665303"
    CURRENCY_LABEL: str = "Rs"

    # Outbound order webhook
    WEBHOOK_TIMEOUT_SECONDS: float = 10.0

    # Image uploads
    UPLOAD_DIR: str = "static/uploads"

    # Seed admin account (populate_db.py)
    ADMIN_EMAIL: str = "admin@restaurant.io"
    ADMIN_PASSWORD: str = "admin"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra = "ignore"

settings = Settings()
