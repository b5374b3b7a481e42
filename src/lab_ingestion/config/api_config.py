# ============================================================================
# src/lab_ingestion/config/api_config.py
# ============================================================================
"""
HTTP Layer Settings
- Upload limits
- Request wall-clock ceiling
- Development mode (diagnostic details in error payloads)
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Largest accepted PDF upload"
    )
    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0.0,
        description="Ceiling for a single extraction request"
    )
    DEV_MODE: bool = Field(
        default=False,
        description="Include diagnostic details (e.g. truncated raw model output) in error responses"
    )
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed to call the API from a browser"
    )


api_settings = APISettings()
