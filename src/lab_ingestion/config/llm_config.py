# ============================================================================
# src/lab_ingestion/config/llm_config.py
# ============================================================================
"""
LLM Configuration
- OpenAI / Azure OpenAI credentials and model
- Sampling temperature
- JSON repair of malformed responses
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str = Field(
        default="",
        description="API key for the OpenAI endpoint"
    )
    OPENAI_MODEL: str = Field(
        default="gpt-4o",
        description="Chat model used for extraction and analysis"
    )
    OPENAI_BASE_URL: Optional[str] = Field(
        default=None,
        description="Override for OpenAI-compatible endpoints"
    )

    # Azure (used when endpoint and key are both set)
    AZURE_OPENAI_ENDPOINT: str = Field(default="")
    AZURE_OPENAI_API_KEY: str = Field(default="")
    AZURE_OPENAI_CHAT_MODEL_DEPLOYMENT: str = Field(default="gpt-4o")
    AZURE_OPENAI_API_VERSION: str = Field(default="2024-02-01")

    LLM_TEMPERATURE: float = Field(
        default=0.1,
        ge=0.0, le=2.0,
        description="Temperature for extraction calls (near-deterministic)"
    )
    ANALYSIS_TEMPERATURE: float = Field(
        default=0.2,
        ge=0.0, le=2.0,
        description="Temperature for report analysis calls"
    )
    LLM_MAX_TOKENS: int = Field(
        default=4000,
        ge=256,
        description="Maximum tokens generated per call"
    )
    LLM_REPAIR_JSON: bool = Field(
        default=True,
        description="Try json_repair on responses that fail strict JSON parsing"
    )

    @property
    def use_azure(self) -> bool:
        return bool(self.AZURE_OPENAI_ENDPOINT and self.AZURE_OPENAI_API_KEY)


llm_settings = LLMSettings()
