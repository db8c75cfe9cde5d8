#mystack_controller\orchestrator\service.py

"""Cluster service - the operations the API layer calls."""

import logging
from typing import List

from mystack_controller.core.parser import parse_cluster_config
from mystack_controller.core.platform import Platform
from mystack_controller.core.repository import ClusterConfigRepository
from mystack_controller.orchestrator.cluster import Cluster
from mystack_controller.readiness.checker import ReadinessChecker

logger = logging.getLogger(__name__)


class ClusterService:
    """Builds a fresh Cluster per request from the stored config and drives it."""

    def __init__(
        self,
        config_repo: ClusterConfigRepository,
        platform: Platform,
        deployment_readiness: ReadinessChecker,
        job_readiness: ReadinessChecker,
    ):
        self._config_repo = config_repo
        self._platform = platform
        self._deployment_readiness = deployment_readiness
        self._job_readiness = job_readiness

    # ============================================
    # CLUSTERS
    # ============================================

    def create(self, username: str, cluster_name: str) -> None:
        """Run the named stack for username."""
        cluster = self._load(username, cluster_name)
        logger.info(f"Creating cluster '{cluster_name}' for user {username}")
        cluster.create(self._platform)

    def delete(self, username: str, cluster_name: str) -> None:
        """Tear down username's stack."""
        cluster = self._load(username, cluster_name)
        logger.info(f"Deleting cluster '{cluster_name}' for user {username}")
        cluster.delete(self._platform)

    def apps(self, username: str, cluster_name: str) -> List[str]:
        """Routable hostnames of username's running stack."""
        cluster = self._load(username, cluster_name)
        return cluster.apps(self._platform)

    # ============================================
    # CLUSTER CONFIGS
    # ============================================

    def create_config(self, name: str, yaml_text: str) -> None:
        """Store a stack spec after checking that it parses."""
        parse_cluster_config(yaml_text)
        self._config_repo.create(name, yaml_text)

    def remove_config(self, name: str) -> None:
        self._config_repo.remove(name)

    def get_config(self, name: str) -> str:
        return self._config_repo.get_yaml(name)

    def list_configs(self) -> List[str]:
        return self._config_repo.list_names()

    # ============================================
    # HELPERS
    # ============================================

    def _load(self, username: str, cluster_name: str) -> Cluster:
        return Cluster.from_config(
            self._config_repo,
            username,
            cluster_name,
            self._deployment_readiness,
            self._job_readiness,
        )
