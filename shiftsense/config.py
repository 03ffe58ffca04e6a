"""
ShiftSense configuration.

Every knob (simulated latencies, mock data generation, dashboard constants,
webhook behavior) is read from the environment or a local .env file.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """ShiftSense runtime settings; field names map to upper-case env vars."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_reload: bool = Field(default=True, description="Enable hot reload")
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="CORS allowed origins (comma-separated)",
    )

    # Logging
    log_level: str = Field(default="info", description="Log level")
    log_format: str = Field(default="json", description="Log format (json|console)")

    # Persisted UI settings
    settings_db_path: str = Field(
        default="./data/shiftsense.duckdb", description="DuckDB file for persisted settings"
    )

    # Webhook (external automation intake)
    default_webhook_url: str = Field(
        default="https://mock.n8n.io/webhook/shiftsense-intake",
        description="Webhook URL used when none has been saved",
    )
    webhook_forwarding_enabled: bool = Field(
        default=False, description="POST analyzed metrics to the configured webhook"
    )
    webhook_timeout_seconds: float = Field(default=10.0, gt=0, description="Webhook POST timeout")

    # Simulated latencies (seconds)
    dashboard_delay_seconds: float = Field(default=0.5, ge=0.0)
    history_delay_seconds: float = Field(default=0.8, ge=0.0)
    analysis_delay_seconds: float = Field(default=1.5, ge=0.0)
    save_delay_seconds: float = Field(default=0.5, ge=0.0)
    batch_row_delay_seconds: float = Field(default=0.05, ge=0.0)

    # Mock data generation
    mock_synthetic_count: int = Field(default=40, ge=0, description="Synthetic rows generated at startup")
    mock_seed: Optional[int] = Field(default=None, description="Random seed for reproducible mock data")
    mock_synthetic_scoring: Literal["random", "metrics"] = Field(
        default="random",
        description="Score synthetic rows randomly or with the canonical scorer",
    )
    mock_seed_jitter: int = Field(
        default=0, ge=0, le=4, description="Max random points added to hand-authored seed scores"
    )

    # Dashboard constants
    total_employees: int = Field(default=120, ge=0, description="Team population shown on the dashboard")
    avg_team_adherence: float = Field(default=88.0, ge=0.0, le=100.0)
    dashboard_list_limit: int = Field(default=10, ge=1, le=100)
    team_at_risk_critical_count: int = Field(
        default=5, ge=0, description="Team is 'At Risk' when critical count exceeds this"
    )

    # Development
    dev_mode: bool = Field(default=True, description="Development mode")
    debug: bool = Field(default=False, description="Debug mode")
    testing: bool = Field(default=False, description="Testing mode")

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, v: str) -> List[str]:
        """Parse comma-separated CORS origins."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once on first use."""
    return Settings()
