from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote


@dataclass
class Settings:
    app_name: str = "ApplyTrack"
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./db/applytrack.db")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    adzuna_app_id: str = os.getenv("ADZUNA_APP_ID", "")
    adzuna_api_key: str = os.getenv("ADZUNA_API_KEY", "")
    adzuna_country: str = os.getenv("ADZUNA_COUNTRY", "us")
    connector_timeout_seconds: float = float(os.getenv("CONNECTOR_TIMEOUT_SECONDS", "20"))
    connector_max_attempts: int = max(1, int(os.getenv("CONNECTOR_MAX_ATTEMPTS", "3")))
    connector_retry_wait_seconds: float = float(os.getenv("CONNECTOR_RETRY_WAIT_SECONDS", "1.0"))
    default_owner_username: str = os.getenv("DEFAULT_OWNER_USERNAME", "owner")
    default_owner_password: str = os.getenv("DEFAULT_OWNER_PASSWORD", "owner1234")
    auth_secret: str = os.getenv("AUTH_SECRET", "applytrack-dev-secret")
    auth_token_ttl_seconds: int = int(os.getenv("AUTH_TOKEN_TTL_SECONDS", str(60 * 60 * 24 * 14)))
    password_hash_iterations: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", "210000"))

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
