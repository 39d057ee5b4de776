"""Application configuration using Pydantic settings."""
from pathlib import Path
from pydantic_settings import BaseSettings
from typing import List, Optional

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./pagedrop.db"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    environment: str = "development"

    # CORS
    allowed_origins: str = "*"

    # Storage
    sites_dir: str = "hosted-sites"
    public_dir: str = str(PACKAGE_DIR / "public")
    public_base_url: Optional[str] = None  # Overrides the request host in site URLs

    # Ingestion limits
    max_upload_files: int = 50
    max_upload_bytes: int = 50 * 1024 * 1024  # 50MB
    fetch_timeout_seconds: float = 30.0

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
