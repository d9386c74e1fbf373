# config/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "Digital Wardrobe"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database URL (async driver; SQLite by default)
    DATABASE_URL: str = "sqlite+aiosqlite:///./wardrobe.db"
    AUTO_CREATE_TABLES: bool = True

    # Bearer tokens
    SECRET_KEY: str = "change-me-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # AI provider. Only "gemini" is implemented; no key means no provider.
    AI_PROVIDER: str = "gemini"
    GOOGLE_GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    AI_MAX_RETRIES: int = 3
    AI_RETRY_BASE_DELAY: float = 1.0

    # Object storage. S3 is used when a bucket is configured.
    S3_BUCKET: Optional[str] = None
    AWS_REGION: str = "ap-south-1"
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_SIZE_MB: int = 10

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra='ignore')

settings = Settings()

if __name__ == "__main__":
    print(f"Project Name: {settings.PROJECT_NAME}")
    print(f"Google Gemini API Key Loaded: {'Yes' if settings.GOOGLE_GEMINI_API_KEY else 'No'}")
    print(f"S3 Bucket: {settings.S3_BUCKET or 'not configured (local storage)'}")
    print(f"Database URL: {settings.DATABASE_URL}")
