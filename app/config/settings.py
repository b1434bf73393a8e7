# app/config/settings.py
from pydantic_settings import BaseSettings
from typing import List
import os

class Settings(BaseSettings):
    # App Info
    app_name: str = "Claim Settlement API"
    version: str = "1.0.0"
    debug: bool = False

    # Database - SQLite local, PostgreSQL en producción
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./claim_settlement.db")
    sqlite_busy_timeout_ms: int = 30000

    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", 5000))

    # CORS
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # SSL para PostgreSQL en producción
    @property
    def database_url_with_ssl(self) -> str:
        """Agregar SSL para conexiones hosted"""
        if self.database_url and "render" in self.database_url:
            if "?sslmode=" not in self.database_url:
                return f"{self.database_url}?sslmode=require"
        return self.database_url

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = 'ignore'

settings = Settings()
