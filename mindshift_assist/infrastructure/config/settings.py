from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Core app settings
    app_name: str = Field(default="MindShift Assistance Service")
    environment: str = Field(default="local", alias="MINDSHIFT_ENVIRONMENT")  # local, dev, prod

    # Completion backend
    llm_provider: Literal["openai", "vertex"] = Field(default="openai", alias="MINDSHIFT_LLM_PROVIDER")

    # OpenAI-compatible API; the key is only checked when a call is attempted
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="MINDSHIFT_OPENAI_BASE_URL")
    openai_model: str = Field(default="gpt-4o-mini", alias="MINDSHIFT_OPENAI_MODEL")

    # Vertex AI / GCP
    gcp_project_id: Optional[str] = Field(default=None, alias="MINDSHIFT_GCP_PROJECT_ID")
    gcp_location: str = Field(default="europe-west4", alias="MINDSHIFT_GCP_LOCATION")
    vertex_model_name: str = Field(
        default="gemini-2.0-flash-001",
        alias="MINDSHIFT_VERTEX_MODEL_NAME",
    )

    # Session limits
    max_calls_per_session: int = Field(default=10, alias="MINDSHIFT_MAX_CALLS_PER_SESSION")
    target_cost_per_session: Decimal = Field(default=Decimal("0.05"), alias="MINDSHIFT_TARGET_COST_PER_SESSION")

    # Pricing per 1,000 tokens
    input_rate_per_1k: Decimal = Field(default=Decimal("0.00015"), alias="MINDSHIFT_INPUT_RATE_PER_1K")
    output_rate_per_1k: Decimal = Field(default=Decimal("0.0006"), alias="MINDSHIFT_OUTPUT_RATE_PER_1K")

    # Generation parameters
    default_max_tokens: int = Field(default=150, alias="MINDSHIFT_DEFAULT_MAX_TOKENS")
    linguistic_max_tokens: int = Field(default=100, alias="MINDSHIFT_LINGUISTIC_MAX_TOKENS")
    default_temperature: float = Field(default=0.7, alias="MINDSHIFT_DEFAULT_TEMPERATURE")
    linguistic_temperature: float = Field(default=0.3, alias="MINDSHIFT_LINGUISTIC_TEMPERATURE")

    # Bounded wait for the outbound call
    model_timeout_seconds: float = Field(default=10.0, alias="MINDSHIFT_MODEL_TIMEOUT_SECONDS")
    model_max_retries: int = Field(default=2, alias="MINDSHIFT_MODEL_MAX_RETRIES")

    # Usage ledger backend
    usage_store_backend: Literal["memory", "expiring"] = Field(default="memory", alias="MINDSHIFT_USAGE_STORE_BACKEND")
    usage_ttl_seconds: float = Field(default=4 * 3600.0, alias="MINDSHIFT_USAGE_TTL_SECONDS")

    # Telemetry base switches
    telemetry_enabled: bool = Field(default=True, alias="MINDSHIFT_TELEMETRY_ENABLED")

    class Config:
        # # Use env variables only; main.py loads .env explicitly
        env_file = None
        case_sensitive = True
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    # # Cached settings instance for reuse
    return Settings()
