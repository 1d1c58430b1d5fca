"""Application configuration with validation."""
from typing import Literal
from functools import lru_cache
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Evaluation engine settings, overridable from the environment or .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "RFP Evaluation Engine"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # Rubric validation
    WEIGHT_TOLERANCE: float = Field(
        default=1e-6,
        gt=0,
        le=0.01,
        description="Allowed deviation of the summed criterion weights from 1.0",
    )

    # Consensus
    CONSENSUS_SPREAD_THRESHOLD: float = Field(
        default=1.0,
        ge=0,
        description="Score spread (max - min) above which a criterion is flagged for review",
    )
    HIGH_CONFIDENCE_THRESHOLD: float = Field(default=0.8, ge=0, le=1)
    MODERATE_CONFIDENCE_THRESHOLD: float = Field(default=0.6, ge=0, le=1)

    # Lifecycle
    DEFAULT_REQUIRED_EVALUATORS: int = Field(default=3, ge=1, le=50)

    # Blind evaluation
    MASKED_VENDOR_LABEL: str = "Vendor identity hidden"

    @model_validator(mode="after")
    def validate_confidence_thresholds(self):
        """Moderate band must sit strictly below the high band."""
        if self.MODERATE_CONFIDENCE_THRESHOLD >= self.HIGH_CONFIDENCE_THRESHOLD:
            raise ValueError(
                "MODERATE_CONFIDENCE_THRESHOLD must be lower than HIGH_CONFIDENCE_THRESHOLD, "
                f"got {self.MODERATE_CONFIDENCE_THRESHOLD} >= {self.HIGH_CONFIDENCE_THRESHOLD}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
