# mystack_controller/core/config.py

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


# Readiness timing used when a stack spec omits period/timeout values.
DEFAULT_PERIOD_SECONDS = 0
DEFAULT_TIMEOUT_SECONDS = 0


class ControllerSettings(BaseSettings):
    """Controller configuration from environment variables (MYSTACK_*)."""

    model_config = SettingsConfigDict(
        env_prefix="MYSTACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Readiness
    default_period_seconds: int = DEFAULT_PERIOD_SECONDS
    default_timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    poll_interval_seconds: float = 1.0

    # Orchestration
    rollback_on_failure: bool = False
    delete_wait_timeout_seconds: int = 0

    # Kubernetes
    kube_in_cluster: Optional[bool] = None
    kube_request_timeout_seconds: int = 30

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000


settings = ControllerSettings()
