# mystack_controller/domain/deployment.py
"""Deployment resource: one per declared service or app."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mystack_controller.core.errors import PlatformError
from mystack_controller.core.models import EnvVar, Probe
from mystack_controller.core.platform import Manifest, Platform
from mystack_controller.domain.labels import (
    username_to_namespace, validate_dns_label, workload_labels
)

logger = logging.getLogger(__name__)


def render_env(env: List[EnvVar]) -> List[Dict[str, str]]:
    return [{"name": var.name, "value": var.value} for var in env]


@dataclass
class Deployment:
    """Long-running workload for a service or app."""
    name: str
    username: str
    image: str
    ports: List[int] = field(default_factory=list)
    env: List[EnvVar] = field(default_factory=list)
    probe: Optional[Probe] = None

    @property
    def namespace(self) -> str:
        return username_to_namespace(self.username)

    def render(self) -> Manifest:
        """Build the apps/v1 Deployment manifest."""
        validate_dns_label(self.name, "deployment")
        labels = workload_labels(self.name, self.username)

        container: Dict[str, Any] = {
            "name": self.name,
            "image": self.image,
        }
        if self.ports:
            container["ports"] = [{"containerPort": port} for port in self.ports]
        if self.env:
            container["env"] = render_env(self.env)
        if self.probe is not None:
            readiness_probe: Dict[str, Any] = {"exec": {"command": list(self.probe.command)}}
            # Zero leaves the platform default in place
            if self.probe.period_seconds > 0:
                readiness_probe["periodSeconds"] = self.probe.period_seconds
            container["readinessProbe"] = readiness_probe

        return {
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": labels,
            },
            "spec": {
                "replicas": 1,
                "selector": {"matchLabels": {"app": self.name}},
                "template": {
                    "metadata": {"labels": dict(labels)},
                    "spec": {"containers": [container]},
                },
            },
        }

    def submit(self, platform: Platform) -> Manifest:
        manifest = self.render()
        try:
            created = platform.create_deployment(self.namespace, manifest)
        except PlatformError as e:
            logger.error(f"[{self.namespace}] create deployment {self.name} failed: {e}")
            raise type(e)("create deployment error", e.cause) from e

        logger.info(f"[{self.namespace}] created deployment {self.name} ({self.image})")
        return created
