# mystack_controller/domain/service.py
"""Service resource: exposes a Deployment of the same name inside the namespace."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from mystack_controller.core.errors import PlatformError
from mystack_controller.core.models import PortMap
from mystack_controller.core.platform import Manifest, Platform
from mystack_controller.domain.labels import (
    ROUTABLE_LABEL, username_to_namespace, validate_dns_label, workload_labels
)

logger = logging.getLogger(__name__)


@dataclass
class Service:
    name: str
    username: str
    ports: List[PortMap] = field(default_factory=list)

    @property
    def namespace(self) -> str:
        return username_to_namespace(self.username)

    def render(self) -> Manifest:
        """Build the v1 ClusterIP Service manifest, labelled routable."""
        validate_dns_label(self.name, "service")

        labels = workload_labels(self.name, self.username)
        labels[ROUTABLE_LABEL] = "true"

        ports: List[Dict[str, Any]] = []
        for port_map in self.ports:
            port_spec: Dict[str, Any] = {
                "protocol": "TCP",
                "port": port_map.port,
                "targetPort": port_map.target_port,
            }
            # Multi-port services need named ports
            if len(self.ports) > 1:
                port_spec["name"] = f"port-{port_map.port}"
            ports.append(port_spec)

        return {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": labels,
            },
            "spec": {
                "selector": {"app": self.name},
                "ports": ports,
                "type": "ClusterIP",
            },
        }

    def submit(self, platform: Platform) -> Manifest:
        manifest = self.render()
        try:
            created = platform.create_service(self.namespace, manifest)
        except PlatformError as e:
            logger.error(f"[{self.namespace}] create service {self.name} failed: {e}")
            raise type(e)("create service error", e.cause) from e

        logger.info(f"[{self.namespace}] created service {self.name}")
        return created
