"""
Core configuration management using Pydantic Settings.
Follows 12-factor app principles for environment-based configuration.
"""

from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application
    app_name: str = "MedScan Product Resolution API"
    version: str = "1.0.0"
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(default="sqlite:///./medscan.db")

    # Product sources
    source_timeout: float = Field(default=10.0)  # seconds, per request
    user_agent: str = Field(default="MedScan/1.0")
    source_order: str = Field(default="openfda,upcitemdb,rxnorm,dailymed")  # comma separated
    openfda_ndc_url: str = Field(default="https://api.fda.gov/drug/ndc.json")
    upcitemdb_lookup_url: str = Field(default="https://api.upcitemdb.com/prod/trial/lookup")
    rxnorm_ndcstatus_url: str = Field(default="https://rxnav.nlm.nih.gov/REST/ndcstatus.json")
    dailymed_spls_url: str = Field(
        default="https://dailymed.nlm.nih.gov/dailymed/services/v2/spls.json"
    )

    @field_validator("source_timeout")
    def validate_source_timeout(cls, v):
        """Source calls must stay bounded."""
        if v <= 0 or v > 60:
            raise ValueError("Source timeout must be within (0, 60] seconds")
        return v

    @field_validator("environment")
    def validate_environment(cls, v):
        """Validate environment values."""
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v

    @property
    def source_names(self) -> List[str]:
        """Configured source order as a list of provider names."""
        return [name.strip().lower() for name in self.source_order.split(",") if name.strip()]


# Global settings instance
settings = Settings()


# Environment-specific configurations
class DevelopmentConfig(Settings):
    """Development environment configuration."""
    environment: str = "development"
    debug: bool = True
    log_level: str = "DEBUG"
    log_json: bool = False


class ProductionConfig(Settings):
    """Production environment configuration."""
    environment: str = "production"
    debug: bool = False
    log_level: str = "WARNING"


def get_settings() -> Settings:
    """Factory function to get environment-specific settings."""
    env = settings.environment.lower()

    if env == "production":
        return ProductionConfig()
    elif env == "development":
        return DevelopmentConfig()
    else:
        return Settings()
