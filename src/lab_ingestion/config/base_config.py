# ============================================================================
# src/lab_ingestion/config/base_config.py
# ============================================================================
"""
Base Configuration
- Data directory
- Report store backend and database path
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseSettingsConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATA_DIR: Path = Field(
        default=Path("data"),
        description="Directory for persisted uploads and reports"
    )

    REPORTS_DB_PATH: Path = Field(
        default=Path("data/reports.db"),
        description="SQLite database backing the upload/report repositories"
    )

    STORE_BACKEND: str = Field(
        default="sqlite",
        pattern="^(sqlite|memory)$",
        description="Report repository backend: 'sqlite' (durable) or 'memory' (process-local)"
    )

    def create_directories(self):
        """Create all necessary directories if they don't exist"""
        for directory in (self.DATA_DIR, self.REPORTS_DB_PATH.parent):
            directory.mkdir(parents=True, exist_ok=True)


# Global instance
base_settings = BaseSettingsConfig()
