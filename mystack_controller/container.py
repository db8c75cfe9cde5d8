#mystack_controller\container.py

"""Dependency injection container - wires all services together."""

from mystack_controller.infrastructure.k8s.platform import KubernetesPlatform
from mystack_controller.infrastructure.postgres.repository import PostgresClusterConfigRepository
from mystack_controller.orchestrator.service import ClusterService
from mystack_controller.readiness.checker import DeploymentReadiness, JobReadiness


# ============================================
# REPOSITORIES
# ============================================

config_repository = PostgresClusterConfigRepository()


# ============================================
# PLATFORM
# ============================================

platform = KubernetesPlatform()


# ============================================
# READINESS
# ============================================

deployment_readiness = DeploymentReadiness()
job_readiness = JobReadiness()


# ============================================
# SERVICES
# ============================================

cluster_service = ClusterService(
    config_repo=config_repository,
    platform=platform,
    deployment_readiness=deployment_readiness,
    job_readiness=job_readiness,
)
