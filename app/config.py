"""
Application Configuration
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    database_url: Optional[str] = None

    # Environment
    environment: str = "development"

    # Import / Export
    auto_fix_sequences: bool = True  # Reset id sequences after a clear-and-replace import
    export_version: str = "0.0.1"
    export_directory: str = "exports"

    # Update client
    api_base_url: str = "http://localhost:8000"
    manifest_url: str = "http://localhost:8080/manifest.json"
    snapshot_sources: List[str] = [
        "http://localhost:8080/json/ayto-vip-2025.json",
        "http://localhost:8080/ayto-vip-2025.json",
        "http://localhost:8080/json/ayto-vip-2024.json",
    ]
    http_timeout_seconds: float = 10.0
    request_deadline_seconds: float = 30.0  # Upper bound for one logical request
    auto_update: bool = False  # Apply available updates during client start

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
