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

    # Table store (any SQLAlchemy URL)
    TABLE_STORAGE_URL: str = "sqlite:///./abc_retail.db"

    # Blob containers and file shares live under these directories
    BLOB_STORAGE_ROOT: str = "storage/blobs"
    FILE_SHARE_ROOT: str = "storage/files"
    # Public prefix the web tier serves blob containers from
    BLOB_PUBLIC_URL: str = "http://127.0.0.1:8000/blobs"

    # Base URL of the ingest functions app
    FUNCTIONS_BASE_URL: str = "http://localhost:7002/api"

    FRONTEND_URL: Optional[str] = None
    QUEUE_POLL_SECONDS: float = 5
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)

settings = Settings()
