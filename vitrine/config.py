"""VITRINE — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Source Sheet ──
    sheets_id: str = ""
    sheet_export_url: Optional[str] = None  # SharePoint / proxy override
    sheet_tabs: str = ""  # Comma-separated; empty means every tab
    request_timeout: float = 30.0

    # ── Database ──
    database_url: str = ""
    persist_snapshots: bool = True

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    refresh_interval_minutes: int = 5
    cache_max_age_seconds: int = 300

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/vitrine.db"
        return "sqlite:///./vitrine.db"

    @property
    def effective_export_url(self) -> str:
        """Return the explicit export URL, or the Google Sheets xlsx export."""
        if self.sheet_export_url:
            return self.sheet_export_url
        if not self.sheets_id:
            return ""
        return f"https://docs.google.com/spreadsheets/d/{self.sheets_id}/export?format=xlsx"

    @property
    def tab_allow_list(self) -> List[str]:
        return [t.strip() for t in self.sheet_tabs.split(",") if t.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
