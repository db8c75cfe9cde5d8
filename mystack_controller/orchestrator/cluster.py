# mystack_controller/orchestrator/cluster.py
"""Cluster orchestrator - materialises one user's stack inside its namespace."""

import logging
import threading
import time
from enum import Enum
from typing import List, Optional

from mystack_controller.core.config import settings
from mystack_controller.core.errors import (
    MystackError,
    NamespaceConflictError,
    NamespaceNotFoundError,
    PlatformConflictError,
    PlatformNotFoundError,
)
from mystack_controller.core.models import ClusterSpec
from mystack_controller.core.parser import TimingDefaults, parse_cluster_config
from mystack_controller.core.platform import Platform
from mystack_controller.core.repository import ClusterConfigRepository
from mystack_controller.domain.deployment import Deployment
from mystack_controller.domain.job import Job, merge_env
from mystack_controller.domain.labels import (
    HERITAGE,
    HERITAGE_LABEL,
    OWNER_LABEL,
    ROUTABLE_SELECTOR,
    username_to_namespace,
    validate_dns_label,
)
from mystack_controller.domain.service import Service
from mystack_controller.readiness.checker import ReadinessChecker

logger = logging.getLogger(__name__)


class ClusterState(Enum):
    """Lifecycle of one orchestration request."""
    UNSTARTED = "UNSTARTED"
    CREATING = "CREATING"
    READY = "READY"
    DELETING = "DELETING"
    DELETED = "DELETED"
    FAILED = "FAILED"


class Cluster:
    """
    One user's stack.

    Holds no persisted state: the platform namespace is the only marker of a
    running cluster. Built fresh for every run/delete request.

    Flow (create):
    1. Claim the namespace (platform create is the exclusivity point)
    2. Submit service then app Deployments, then their Services
    3. Run the setup Job and wait for it to complete
    4. Wait for every probed service Deployment to roll out
    """

    def __init__(
        self,
        username: str,
        deployment_readiness: ReadinessChecker,
        job_readiness: ReadinessChecker,
        app_deployments: Optional[List[Deployment]] = None,
        svc_deployments: Optional[List[Deployment]] = None,
        app_services: Optional[List[Service]] = None,
        svc_services: Optional[List[Service]] = None,
        job: Optional[Job] = None,
        rollback_on_failure: Optional[bool] = None,
    ):
        self.username = username
        self.namespace = username_to_namespace(username)
        self.app_deployments = app_deployments or []
        self.svc_deployments = svc_deployments or []
        self.app_services = app_services or []
        self.svc_services = svc_services or []
        self.job = job
        self.deployment_readiness = deployment_readiness
        self.job_readiness = job_readiness
        self.rollback_on_failure = (
            rollback_on_failure if rollback_on_failure is not None
            else settings.rollback_on_failure
        )
        self.state = ClusterState.UNSTARTED

    # ============================================
    # CONSTRUCTION
    # ============================================

    @classmethod
    def from_spec(
        cls,
        username: str,
        spec: ClusterSpec,
        deployment_readiness: ReadinessChecker,
        job_readiness: ReadinessChecker,
        **kwargs,
    ) -> "Cluster":
        """Build the resource graph for a parsed stack spec."""
        svc_deployments, svc_services = [], []
        for name, workload in spec.services.items():
            svc_deployments.append(Deployment(
                name=name,
                username=username,
                image=workload.image,
                ports=workload.container_ports,
                env=list(workload.env),
                probe=workload.probe,
            ))
            svc_services.append(Service(name=name, username=username, ports=list(workload.ports)))

        app_deployments, app_services = [], []
        for name, workload in spec.apps.items():
            app_deployments.append(Deployment(
                name=name,
                username=username,
                image=workload.image,
                ports=workload.container_ports,
                env=list(workload.env),
            ))
            app_services.append(Service(name=name, username=username, ports=list(workload.ports)))

        job = None
        if spec.setup is not None:
            # Setup sees its own env first, then everything the stack declares
            job = Job(
                username=username,
                setup=spec.setup,
                env=merge_env(
                    spec.setup.env,
                    *[workload.env for workload in spec.services.values()],
                    *[workload.env for workload in spec.apps.values()],
                ),
            )

        return cls(
            username=username,
            deployment_readiness=deployment_readiness,
            job_readiness=job_readiness,
            app_deployments=app_deployments,
            svc_deployments=svc_deployments,
            app_services=app_services,
            svc_services=svc_services,
            job=job,
            **kwargs,
        )

    @classmethod
    def from_config(
        cls,
        repository: ClusterConfigRepository,
        username: str,
        cluster_name: str,
        deployment_readiness: ReadinessChecker,
        job_readiness: ReadinessChecker,
        defaults: Optional[TimingDefaults] = None,
        **kwargs,
    ) -> "Cluster":
        """
        Load the named stack spec from storage and build its cluster.

        Raises:
            ConfigNotFoundError: no spec stored under cluster_name
            SpecError: stored spec does not parse
        """
        text = repository.get_yaml(cluster_name)
        spec = parse_cluster_config(text, defaults)
        return cls.from_spec(username, spec, deployment_readiness, job_readiness, **kwargs)

    # ============================================
    # CREATE
    # ============================================

    def create(self, platform: Platform, cancel_event: Optional[threading.Event] = None) -> None:
        """
        Create the namespace and every resource, then wait for readiness.

        Raises:
            NamespaceConflictError: the user already has a running cluster
            SpecError / PlatformError: a resource could not be rendered or submitted
            ReadinessError: setup job or probed service never became ready
        """
        self._transition(ClusterState.CREATING)

        try:
            self._check_names()
            self._claim_namespace(platform)
        except MystackError:
            self._transition(ClusterState.FAILED)
            raise

        try:
            self._submit_resources(platform)
            self._wait_for_readiness(platform, cancel_event)
        except MystackError as e:
            logger.error(f"[{self.namespace}] create failed: {e}")
            self._transition(ClusterState.FAILED)
            if self.rollback_on_failure:
                self._compensate(platform)
            raise

        self._transition(ClusterState.READY)

    def _check_names(self) -> None:
        # Rejected before the namespace exists so a bad name leaves nothing behind
        for deployment in self.svc_deployments + self.app_deployments:
            validate_dns_label(deployment.name, "deployment")
        for service in self.svc_services + self.app_services:
            validate_dns_label(service.name, "service")

    def _claim_namespace(self, platform: Platform) -> None:
        if platform.namespace_exists(self.namespace):
            raise NamespaceConflictError(self.username)

        # The pre-check above is advisory; a concurrent create surfaces here
        try:
            platform.create_namespace(
                self.namespace,
                labels={HERITAGE_LABEL: HERITAGE, OWNER_LABEL: self.username},
            )
        except PlatformConflictError as e:
            raise NamespaceConflictError(self.username) from e

        logger.info(f"[{self.namespace}] namespace created for user {self.username}")

    def _submit_resources(self, platform: Platform) -> None:
        for deployment in self.svc_deployments + self.app_deployments:
            deployment.submit(platform)

        for service in self.svc_services + self.app_services:
            service.submit(platform)

    def _wait_for_readiness(
        self,
        platform: Platform,
        cancel_event: Optional[threading.Event],
    ) -> None:
        if self.job is not None:
            self.job.submit(platform)
            self.job_readiness.wait_until_ready(
                platform,
                self.job,
                self.job.period_seconds,
                self.job.timeout_seconds,
                cancel_event=cancel_event,
            )

        for deployment in self.svc_deployments:
            if deployment.probe is None:
                continue
            self.deployment_readiness.wait_until_ready(
                platform,
                deployment,
                deployment.probe.period_seconds,
                deployment.probe.timeout_seconds,
                cancel_event=cancel_event,
            )

    def _compensate(self, platform: Platform) -> None:
        """Best-effort removal of a namespace this call created."""
        try:
            platform.delete_namespace(self.namespace)
            logger.info(f"[{self.namespace}] rolled back partially created cluster")
        except MystackError as e:
            logger.error(f"[{self.namespace}] rollback failed, namespace left in place: {e}")

    # ============================================
    # DELETE
    # ============================================

    def delete(self, platform: Platform, wait_timeout_seconds: Optional[int] = None) -> None:
        """
        Delete the user's namespace; the platform cascades to its contents.

        Raises:
            NamespaceNotFoundError: the user has no running cluster
        """
        self._transition(ClusterState.DELETING)

        try:
            if not platform.namespace_exists(self.namespace):
                raise NamespaceNotFoundError(self.username)

            try:
                platform.delete_namespace(self.namespace)
            except PlatformNotFoundError as e:
                raise NamespaceNotFoundError(self.username) from e

            logger.info(f"[{self.namespace}] namespace deletion accepted")

            if wait_timeout_seconds is None:
                wait_timeout_seconds = settings.delete_wait_timeout_seconds
            if wait_timeout_seconds > 0:
                self._wait_for_namespace_gone(platform, wait_timeout_seconds)
        except MystackError:
            self._transition(ClusterState.FAILED)
            raise

        self._transition(ClusterState.DELETED)

    def _wait_for_namespace_gone(self, platform: Platform, timeout_seconds: int) -> None:
        deadline = time.monotonic() + timeout_seconds
        while platform.namespace_exists(self.namespace):
            if time.monotonic() >= deadline:
                logger.warning(
                    f"[{self.namespace}] still terminating after {timeout_seconds}s"
                )
                return
            time.sleep(settings.poll_interval_seconds)

        logger.info(f"[{self.namespace}] namespace removed")

    # ============================================
    # APPS
    # ============================================

    def apps(self, platform: Platform) -> List[str]:
        """
        Hostnames of the routable services in the user's namespace.

        Raises:
            NamespaceNotFoundError: the user has no running cluster
        """
        if not platform.namespace_exists(self.namespace):
            raise NamespaceNotFoundError(self.username)

        services = platform.list_services(self.namespace, label_selector=ROUTABLE_SELECTOR)
        return [
            f"{service['metadata']['name']}.{self.namespace}"
            for service in services
        ]

    # ============================================
    # HELPERS
    # ============================================

    def _transition(self, new_state: ClusterState) -> None:
        if self.state != new_state:
            logger.debug(f"[{self.namespace}] {self.state.value} -> {new_state.value}")
        self.state = new_state
