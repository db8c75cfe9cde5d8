# mystack_controller/domain/job.py
"""Setup job: one-shot task run when a stack is created."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from mystack_controller.core.errors import PlatformError
from mystack_controller.core.models import EnvVar, Setup
from mystack_controller.core.platform import Manifest, Platform
from mystack_controller.domain.deployment import render_env
from mystack_controller.domain.labels import username_to_namespace, workload_labels

logger = logging.getLogger(__name__)


SETUP_JOB_NAME = "setup"


@dataclass
class Job:
    username: str
    setup: Setup
    env: List[EnvVar] = field(default_factory=list)
    name: str = SETUP_JOB_NAME

    @property
    def namespace(self) -> str:
        return username_to_namespace(self.username)

    @property
    def period_seconds(self) -> int:
        return self.setup.period_seconds

    @property
    def timeout_seconds(self) -> int:
        return self.setup.timeout_seconds

    def render(self) -> Manifest:
        """Build the batch/v1 Job manifest. The pod is never restarted."""
        labels = workload_labels(self.name, self.username)

        container: Dict[str, Any] = {
            "name": self.name,
            "image": self.setup.image,
        }
        if self.env:
            container["env"] = render_env(self.env)

        return {
            "apiVersion": "batch/v1",
            "kind": "Job",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": labels,
            },
            "spec": {
                "backoffLimit": 0,
                "template": {
                    "metadata": {"labels": dict(labels)},
                    "spec": {
                        "restartPolicy": "Never",
                        "containers": [container],
                    },
                },
            },
        }

    def submit(self, platform: Platform) -> Manifest:
        manifest = self.render()
        try:
            created = platform.create_job(self.namespace, manifest)
        except PlatformError as e:
            logger.error(f"[{self.namespace}] create job {self.name} failed: {e}")
            raise type(e)("create job error", e.cause) from e

        logger.info(f"[{self.namespace}] created job {self.name} ({self.setup.image})")
        return created


def merge_env(*groups: List[EnvVar]) -> List[EnvVar]:
    """Concatenate env groups, keeping the first declaration of each name."""
    seen = set()
    merged: List[EnvVar] = []
    for group in groups:
        for var in group:
            if var.name in seen:
                continue
            seen.add(var.name)
            merged.append(var)
    return merged
