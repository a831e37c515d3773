# ============================================================================
# FILE: videotube/config.py
# ============================================================================
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "VideoTube"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./videotube.db"  # Change to PostgreSQL in production

    # Security
    ACCESS_TOKEN_SECRET: str = "access-secret-change-this-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REFRESH_TOKEN_SECRET: str = "refresh-secret-change-this-in-production"
    REFRESH_TOKEN_EXPIRE_DAYS: int = 10
    ALGORITHM: str = "HS256"
    COOKIE_SECURE: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Media host (Cloudinary)
    UPLOAD_TEMP_DIR: str = "./public/temp"
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_UPLOAD_URL: str = "https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload"
    UPLOAD_TIMEOUT_SECONDS: float = 60.0

    class Config:
        env_file = ".env"
        case_sensitive = True

@lru_cache
def get_settings() -> Settings:
    """Settings for the ASGI entry point; everything else receives them explicitly"""
    return Settings()
