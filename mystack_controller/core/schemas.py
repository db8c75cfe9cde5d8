"""Pydantic schemas for the stack specification document."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ============================================
# Leaf Schemas
# ============================================

class EnvVarSchema(BaseModel):
    """Environment variable; the value is always kept as a string."""

    name: str
    value: str = ""

    model_config = ConfigDict(extra="ignore")

    @field_validator("value", mode="before")
    @classmethod
    def value_to_string(cls, value: Any) -> str:
        return _stringify(value)


class ProbeSchema(BaseModel):
    command: List[str] = Field(default_factory=list)
    period_seconds: Optional[int] = Field(default=None, alias="period-seconds", ge=0)
    timeout_seconds: Optional[int] = Field(
        default=None, alias="start-deployment-timeout-seconds", ge=0
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("command", mode="before")
    @classmethod
    def command_to_strings(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, list):
            return [_stringify(item) for item in value]
        return value


class SetupSchema(BaseModel):
    image: str
    period_seconds: Optional[int] = Field(default=None, alias="period-seconds", ge=0)
    timeout_seconds: Optional[int] = Field(default=None, alias="timeout-seconds", ge=0)
    env: List[EnvVarSchema] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("env", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class WorkloadSchema(BaseModel):
    """Service or app entry. Ports stay raw tokens until the parser resolves them."""

    image: str
    ports: List[str] = Field(default_factory=list)
    env: List[EnvVarSchema] = Field(default_factory=list)
    readiness_probe: Optional[ProbeSchema] = Field(default=None, alias="readiness-probe")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("ports", "env", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("ports", mode="before")
    @classmethod
    def ports_to_tokens(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_stringify(item) for item in value]
        return value


# ============================================
# Document
# ============================================

class ClusterConfigSchema(BaseModel):
    setup: Optional[SetupSchema] = None
    services: Dict[str, WorkloadSchema] = Field(default_factory=dict)
    apps: Dict[str, WorkloadSchema] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")

    @field_validator("services", "apps", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value
