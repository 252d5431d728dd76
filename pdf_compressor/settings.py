from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    logs_dir: Path
    log_level: str

    max_upload_bytes: int
    session_ttl_minutes: int

    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 10

    @property
    def session_ttl_seconds(self) -> int:
        return max(0, self.session_ttl_minutes) * 60

    @staticmethod
    def from_env() -> "Settings":
        host = os.getenv("HOST", "127.0.0.1").strip()
        port = _env_int("PORT", 8000)

        logs_dir = Path(os.getenv("LOGS_DIR", "logs"))
        log_level = os.getenv("LOG_LEVEL", "INFO").strip()

        max_upload_bytes = _env_int("MAX_UPLOAD_BYTES", 100 * 1024 * 1024)  # 100 MiB
        session_ttl_minutes = _env_int("SESSION_TTL_MINUTES", 15)

        log_max_bytes = _env_int("LOG_MAX_BYTES", 10 * 1024 * 1024)  # 0 disables the file log
        log_backup_count = _env_int("LOG_BACKUP_COUNT", 10)

        return Settings(
            host=host,
            port=port,
            logs_dir=logs_dir,
            log_level=log_level,
            max_upload_bytes=max_upload_bytes,
            session_ttl_minutes=session_ttl_minutes,
            log_max_bytes=log_max_bytes,
            log_backup_count=log_backup_count,
        )
