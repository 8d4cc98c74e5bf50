"""Configuration models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AzureConfig(BaseModel):
    """Azure Resource Manager connection settings."""
    subscription_id: str = Field(..., min_length=1)
    endpoint: str = Field(default="https://management.azure.com")
    container_instance_api_version: str = Field(default="2019-12-01")
    network_api_version: str = Field(default="2021-02-01")
    request_timeout: float = Field(default=60.0, gt=0)


class TimeoutsConfig(BaseModel):
    """Per-operation timeouts in seconds."""
    create: float = Field(default=30 * 60, gt=0)
    read: float = Field(default=5 * 60, gt=0)
    update: float = Field(default=30 * 60, gt=0)
    delete: float = Field(default=30 * 60, gt=0)


class PollingConfig(BaseModel):
    """Polling behaviour for long-running operations."""
    operation_interval: float = Field(default=5.0, ge=0)
    detach_min_interval: float = Field(default=15.0, ge=0)
    detach_continuous_target_occurrence: int = Field(default=5, ge=1)


class AcigroupConfig(BaseModel):
    """Main configuration model."""
    azure: AzureConfig
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    log_level: str = Field(default="INFO")
    state_dir: str = Field(default="./state")

    model_config = ConfigDict(extra="ignore")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()
