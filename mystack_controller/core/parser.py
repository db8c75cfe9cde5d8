# mystack_controller/core/parser.py
"""Stack specification parser: YAML text -> ClusterSpec."""

import re
from dataclasses import dataclass
from typing import List, Optional

import yaml
from pydantic import ValidationError

from mystack_controller.core.config import settings
from mystack_controller.core.errors import SpecError
from mystack_controller.core.models import (
    ClusterSpec, EnvVar, PortMap, Probe, Setup, WorkloadSpec
)
from mystack_controller.core.schemas import (
    ClusterConfigSchema, EnvVarSchema, ProbeSchema, SetupSchema, WorkloadSchema
)
from mystack_controller.domain.job import SETUP_JOB_NAME
from mystack_controller.domain.labels import validate_dns_label


PARSE_YAML_ERROR = "parse yaml error"


class StackLoader(yaml.SafeLoader):
    """SafeLoader without YAML 1.1 base-60 integers, so "22:22" stays a string."""


StackLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:int"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
StackLoader.add_implicit_resolver(
    "tag:yaml.org,2002:int",
    re.compile(r'''^(?:[-+]?0b[0-1_]+
                |[-+]?0[0-7_]+
                |[-+]?(?:0|[1-9][0-9_]*)
                |[-+]?0x[0-9a-fA-F_]+)$''', re.X),
    list("-+0123456789"),
)


@dataclass(frozen=True)
class TimingDefaults:
    """Readiness timing applied when the document leaves it out."""
    period_seconds: int
    timeout_seconds: int

    @classmethod
    def from_settings(cls) -> "TimingDefaults":
        return cls(
            period_seconds=settings.default_period_seconds,
            timeout_seconds=settings.default_timeout_seconds,
        )


# ============================================
# Ports
# ============================================

def _parse_port_segment(segment: str) -> int:
    value = int(segment)
    # int() also accepts signs, underscores and surrounding whitespace
    if not (segment.isascii() and segment.isdigit()):
        raise ValueError(f"port must be a plain decimal number: {segment!r}")
    return value


def parse_port_token(token: str) -> PortMap:
    """
    Resolve a port token.

    "N" maps port N to target port N, "N:M" maps port N to target port M.

    Raises:
        SpecError: on a non-numeric or non-positive segment; the message is
            the numeric parse failure itself.
    """
    segments = token.split(":")
    if len(segments) > 2:
        raise SpecError(PARSE_YAML_ERROR, f"invalid port mapping: {token!r}")

    try:
        numbers = [_parse_port_segment(segment) for segment in segments]
    except ValueError as e:
        raise SpecError(PARSE_YAML_ERROR, e) from e

    port = numbers[0]
    target_port = numbers[-1]
    if port <= 0 or target_port <= 0:
        raise SpecError(PARSE_YAML_ERROR, f"port must be positive: {token!r}")

    return PortMap(port=port, target_port=target_port)


# ============================================
# Fragments
# ============================================

def _to_env(env: List[EnvVarSchema]) -> List[EnvVar]:
    return [EnvVar(name=var.name, value=var.value) for var in env]


def _to_probe(schema: ProbeSchema, defaults: TimingDefaults) -> Probe:
    return Probe(
        command=list(schema.command),
        period_seconds=(
            schema.period_seconds if schema.period_seconds is not None
            else defaults.period_seconds
        ),
        timeout_seconds=(
            schema.timeout_seconds if schema.timeout_seconds is not None
            else defaults.timeout_seconds
        ),
    )


def _to_setup(schema: SetupSchema, defaults: TimingDefaults) -> Setup:
    return Setup(
        image=schema.image,
        period_seconds=(
            schema.period_seconds if schema.period_seconds is not None
            else defaults.period_seconds
        ),
        timeout_seconds=(
            schema.timeout_seconds if schema.timeout_seconds is not None
            else defaults.timeout_seconds
        ),
        env=_to_env(schema.env),
    )


def _to_workload(
    schema: WorkloadSchema,
    defaults: TimingDefaults,
    with_probe: bool,
) -> WorkloadSpec:
    probe = None
    if with_probe and schema.readiness_probe is not None:
        probe = _to_probe(schema.readiness_probe, defaults)

    return WorkloadSpec(
        image=schema.image,
        ports=[parse_port_token(token) for token in schema.ports],
        env=_to_env(schema.env),
        probe=probe,
    )


def _check_workload_names(config: ClusterConfigSchema) -> None:
    """Workload names become Deployment and Service names in one namespace."""
    for name in list(config.services) + list(config.apps):
        validate_dns_label(name, "workload")

    shared = set(config.services) & set(config.apps)
    if shared:
        raise SpecError(
            PARSE_YAML_ERROR,
            f"declared as both service and app: {', '.join(sorted(shared))}",
        )

    # The setup pod is labelled app=<job name>; a Service of that name would select it
    if config.setup is not None and (
        SETUP_JOB_NAME in config.services or SETUP_JOB_NAME in config.apps
    ):
        raise SpecError(
            PARSE_YAML_ERROR,
            f"workload name {SETUP_JOB_NAME!r} is reserved for the setup job",
        )


# ============================================
# Entry point
# ============================================

def parse_cluster_config(
    text: str,
    defaults: Optional[TimingDefaults] = None,
) -> ClusterSpec:
    """
    Parse stack specification text into a ClusterSpec.

    Args:
        text: YAML document
        defaults: Timing used for omitted period/timeout values
            (settings-driven when not given)

    Returns:
        Fully validated ClusterSpec

    Raises:
        SpecError: YAML, schema, workload name or port token failure
    """
    defaults = defaults or TimingDefaults.from_settings()

    try:
        document = yaml.load(text, Loader=StackLoader) if text else None
    except yaml.YAMLError as e:
        raise SpecError(PARSE_YAML_ERROR, e) from e

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise SpecError(PARSE_YAML_ERROR, "cluster config must be a YAML mapping")

    try:
        config = ClusterConfigSchema.model_validate(document)
    except ValidationError as e:
        raise SpecError(PARSE_YAML_ERROR, e) from e

    _check_workload_names(config)

    # Apps never carry a readiness probe
    return ClusterSpec(
        setup=_to_setup(config.setup, defaults) if config.setup else None,
        services={
            name: _to_workload(workload, defaults, with_probe=True)
            for name, workload in config.services.items()
        },
        apps={
            name: _to_workload(workload, defaults, with_probe=False)
            for name, workload in config.apps.items()
        },
    )
