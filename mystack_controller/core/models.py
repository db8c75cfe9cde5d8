"""Typed stack specification (the parsed form of a cluster config)."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class PortMap:
    """Service port mapped to a container port."""
    port: int
    target_port: int


@dataclass(frozen=True)
class EnvVar:
    name: str
    value: str = ""


@dataclass
class Probe:
    """Command-based readiness check for a service."""
    command: List[str] = field(default_factory=list)
    period_seconds: int = 0
    timeout_seconds: int = 0


@dataclass
class Setup:
    """One-shot setup job run when the stack is created."""
    image: str
    period_seconds: int = 0
    timeout_seconds: int = 0
    env: List[EnvVar] = field(default_factory=list)


@dataclass
class WorkloadSpec:
    image: str
    ports: List[PortMap] = field(default_factory=list)
    env: List[EnvVar] = field(default_factory=list)
    probe: Optional[Probe] = None

    @property
    def container_ports(self) -> List[int]:
        return [port_map.target_port for port_map in self.ports]


@dataclass
class ClusterSpec:
    """
    Whole stack: optional setup, services (with probes) and apps.

    Mappings keep document order so resource submission is deterministic.
    """
    setup: Optional[Setup] = None
    services: Dict[str, WorkloadSpec] = field(default_factory=dict)
    apps: Dict[str, WorkloadSpec] = field(default_factory=dict)
