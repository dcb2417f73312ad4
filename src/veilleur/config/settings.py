"""
Veilleur configuration with hybrid YAML + ENV support.

Architecture:
- Portal GraphQL (portal_url): execution tier, transaction receipts
- TheGraph GraphQL (thegraph_url): index tier, sync watermark

Priority: Environment variables > YAML config > Pydantic defaults
Nested keys use a double underscore: VEILLEUR_TRACKING__DELAY_MS=500
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackingConfig(BaseSettings):
    """
    Timing budget for the transaction lifecycle tracker.

    All durations are in milliseconds so they read the same as the
    numbers operators already know from the dapp.
    """

    model_config = SettingsConfigDict(env_prefix="VEILLEUR_TRACKING_")

    max_attempts: int = Field(default=30, ge=1, le=1000)
    delay_ms: int = Field(default=2000, ge=1, le=60_000)
    polling_interval_ms: int = Field(default=500, ge=1, le=60_000)
    timeout_ms: int = Field(default=180_000, ge=0, le=3_600_000)
    stream_timeout_ms: Optional[int] = Field(
        default=None,
        ge=0,
        description="Overall cap for one stream; None disables it",
    )

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000

    @property
    def polling_interval_seconds(self) -> float:
        return self.polling_interval_ms / 1000

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def stream_timeout_seconds(self) -> Optional[float]:
        if self.stream_timeout_ms is None:
            return None
        return self.stream_timeout_ms / 1000


class RetryConfig(BaseSettings):
    """Retry configuration for transient transport failures."""

    model_config = SettingsConfigDict(env_prefix="VEILLEUR_RETRY_")

    max_attempts: int = Field(default=3, ge=1, le=10)
    initial_delay: float = Field(default=0.5, ge=0.0, le=10.0)
    max_delay: float = Field(default=4.0, ge=0.0, le=60.0)


class TimeoutConfig(BaseSettings):
    """Per-request HTTP timeouts (seconds)."""

    model_config = SettingsConfigDict(env_prefix="VEILLEUR_TIMEOUT_")

    total: float = Field(default=10.0, ge=1.0, le=60.0)
    connect: float = Field(default=3.0, ge=0.5, le=30.0)


class ResilienceConfig(BaseSettings):
    """Resilience patterns configuration."""

    retry: RetryConfig = Field(default_factory=RetryConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)


class MetricsConfig(BaseSettings):
    """Prometheus metrics configuration."""

    model_config = SettingsConfigDict(env_prefix="VEILLEUR_METRICS_")

    enabled: bool = Field(default=True)
    path: str = Field(default="/metrics")


class VeilleurConfig(BaseSettings):
    """
    Veilleur configuration schema.

    Two upstream services:
    - Portal (execution tier): answers receipt queries
    - TheGraph (index tier): answers watermark queries
    """

    model_config = SettingsConfigDict(
        env_prefix="VEILLEUR_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="allow",
    )

    # HTTP surface
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8770, ge=1024, le=65535)

    # Upstream services
    portal_url: str = Field(
        default="http://portal:7701/graphql",
        description="Portal GraphQL endpoint (execution tier)",
    )
    portal_access_token: Optional[str] = Field(default=None)
    thegraph_url: str = Field(
        default="http://thegraph:8000/subgraphs/name/kit",
        description="TheGraph subgraph endpoint (index tier)",
    )

    # Logging
    log_level: str = Field(default="info")
    json_logs: bool = Field(default=True)

    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """YAML values arrive as init kwargs; environment variables win."""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["debug", "info", "warning", "error", "critical"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid log_level. Must be one of: {allowed}")
        return v_lower

    @field_validator("portal_url", "thegraph_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) endpoint."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid endpoint URL: {v}")
        return v.rstrip("/")


def load_config(config_file: Optional[str] = None) -> VeilleurConfig:
    """
    Load configuration from YAML files.

    Priority: Environment variables > environment-specific YAML > default YAML

    Args:
        config_file: Optional YAML filename override

    Returns:
        VeilleurConfig instance
    """
    env = os.getenv("ENV", "production")

    config_map = {
        "production": "production.yaml",
        "development": "development.yaml",
        "test": "test.yaml",
    }

    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    default_config_path = config_dir / "default.yaml"
    merged_config = {}

    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    if config_file is None:
        config_file = os.getenv("VEILLEUR_CONFIG")
        if not config_file:
            config_file = config_map.get(env, "production.yaml")

    env_config_path = config_dir / config_file

    if env_config_path.exists():
        with open(env_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config.update(loaded)

    return VeilleurConfig(**merged_config)


# Global settings instance
_settings: Optional[VeilleurConfig] = None


def get_settings() -> VeilleurConfig:
    """
    Get singleton settings instance.

    Returns:
        VeilleurConfig instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (tests, config reloads)."""
    global _settings
    _settings = None
