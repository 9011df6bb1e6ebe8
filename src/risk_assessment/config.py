"""Runtime configuration for the risk assessment service."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    service_name: str = "risk-assessment-service"
    service_version: str = "0.1.0"
    log_level: str = "INFO"
    metrics_enabled: bool = True
    event_produced_by: str = "services/risk-assessment-service"

    # "answer" keeps areas in first-answered order, "catalog" in declaration order.
    area_order: Literal["answer", "catalog"] = "answer"

    model_config = SettingsConfigDict(env_prefix="RISK_ASSESSMENT_", extra="ignore")


def get_settings() -> Settings:
    """Return settings object."""

    return Settings()
