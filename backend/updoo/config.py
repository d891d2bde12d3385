from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class Settings:
    app_name: str = os.getenv("APP_NAME", "Updoo")
    environment: str = os.getenv("ENV", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./db/updoo.db")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    default_offer_days: int = int(os.getenv("DEFAULT_OFFER_DAYS", "14"))
    feed_page_size: int = int(os.getenv("FEED_PAGE_SIZE", "15"))
    feed_max_page_size: int = int(os.getenv("FEED_MAX_PAGE_SIZE", "100"))
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    mail_api_url: str = os.getenv("MAIL_API_URL", "")
    mail_api_token: str = os.getenv("MAIL_API_TOKEN", "")
    mail_from_email: str = os.getenv("MAIL_FROM_EMAIL", "no-reply@updoo.pl")
    mail_from_name: str = os.getenv("MAIL_FROM_NAME", "Updoo")
    mail_timeout_seconds: float = float(os.getenv("MAIL_TIMEOUT_SECONDS", "10"))
    default_admin_email: str = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@updoo.pl")
    default_admin_password: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin1234")
    cors_origins: list[str] = field(
        default_factory=lambda: _csv(os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"))
    )

    def ensure_directories(self) -> None:
        self._ensure_sqlite_directory()

    def _ensure_sqlite_directory(self) -> None:
        if not self.database_url.startswith("sqlite:///"):
            return
        raw_path = self.database_url.replace("sqlite:///", "", 1)
        if not raw_path or raw_path == ":memory:":
            return
        db_path = Path(unquote(raw_path))
        if not db_path.is_absolute():
            db_path = Path(".") / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
