# mystack_controller/infrastructure/k8s/platform.py
"""Platform backed by the official Kubernetes Python client."""

import logging
from typing import Any, Callable, Dict, List, Optional

import urllib3
from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from mystack_controller.core.config import settings
from mystack_controller.core.errors import (
    PlatformConflictError,
    PlatformError,
    PlatformNotFoundError,
)
from mystack_controller.core.platform import Manifest, Platform

logger = logging.getLogger(__name__)


class KubernetesPlatform(Platform):
    """
    Talks to the API server with CoreV1Api, AppsV1Api and BatchV1Api.

    Kube config is loaded once, on the first call: in-cluster service
    account first, then the local kubeconfig.
    """

    def __init__(
        self,
        api_client: Optional[client.ApiClient] = None,
        in_cluster: Optional[bool] = None,
        request_timeout_seconds: Optional[int] = None,
    ):
        self._api_client = api_client
        self._in_cluster = in_cluster if in_cluster is not None else settings.kube_in_cluster
        self._request_timeout = (
            request_timeout_seconds if request_timeout_seconds is not None
            else settings.kube_request_timeout_seconds
        )

    # ============================================
    # Client helpers
    # ============================================

    def _ensure_client(self) -> client.ApiClient:
        if self._api_client is not None:
            return self._api_client

        if self._in_cluster is True:
            config.load_incluster_config()
        elif self._in_cluster is False:
            config.load_kube_config()
        else:
            try:
                config.load_incluster_config()
            except config.ConfigException:
                config.load_kube_config()

        self._api_client = client.ApiClient()
        logger.info("Kubernetes client configured")
        return self._api_client

    def core_api(self) -> client.CoreV1Api:
        return client.CoreV1Api(self._ensure_client())

    def apps_api(self) -> client.AppsV1Api:
        return client.AppsV1Api(self._ensure_client())

    def batch_api(self) -> client.BatchV1Api:
        return client.BatchV1Api(self._ensure_client())

    def _call(self, action: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """Run an API call, returning the result in wire (dict) form."""
        try:
            result = fn(*args, _request_timeout=self._request_timeout, **kwargs)
        except ApiException as e:
            if e.status == 409:
                raise PlatformConflictError(action, e) from e
            if e.status == 404:
                raise PlatformNotFoundError(action, e) from e
            raise PlatformError(action, e) from e
        except (urllib3.exceptions.HTTPError, OSError) as e:
            # The API server never answered
            logger.error(f"{action}: {e}")
            raise PlatformError(action, e) from e
        return self._ensure_client().sanitize_for_serialization(result)

    def _read_or_none(self, action: str, fn: Callable[..., Any], *args, **kwargs) -> Optional[Manifest]:
        try:
            return self._call(action, fn, *args, **kwargs)
        except PlatformNotFoundError:
            return None

    # ============================================
    # Namespaces
    # ============================================

    def create_namespace(self, name: str, labels: Optional[Dict[str, str]] = None) -> Manifest:
        body = client.V1Namespace(
            metadata=client.V1ObjectMeta(name=name, labels=labels or {})
        )
        return self._call("create namespace error", self.core_api().create_namespace, body=body)

    def read_namespace(self, name: str) -> Optional[Manifest]:
        return self._read_or_none("get namespace error", self.core_api().read_namespace, name=name)

    def delete_namespace(self, name: str) -> None:
        self._call(
            "delete namespace error",
            self.core_api().delete_namespace,
            name=name,
            body=client.V1DeleteOptions(propagation_policy="Foreground"),
        )

    # ============================================
    # Deployments
    # ============================================

    def create_deployment(self, namespace: str, manifest: Manifest) -> Manifest:
        return self._call(
            "create deployment error",
            self.apps_api().create_namespaced_deployment,
            namespace=namespace,
            body=manifest,
        )

    def read_deployment(self, namespace: str, name: str) -> Optional[Manifest]:
        return self._read_or_none(
            "get deployment error",
            self.apps_api().read_namespaced_deployment,
            name=name,
            namespace=namespace,
        )

    def list_deployments(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        result = self._call(
            "list deployments error",
            self.apps_api().list_namespaced_deployment,
            namespace=namespace,
            label_selector=label_selector,
        )
        return result.get("items") or []

    # ============================================
    # Services
    # ============================================

    def create_service(self, namespace: str, manifest: Manifest) -> Manifest:
        return self._call(
            "create service error",
            self.core_api().create_namespaced_service,
            namespace=namespace,
            body=manifest,
        )

    def list_services(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        result = self._call(
            "list services error",
            self.core_api().list_namespaced_service,
            namespace=namespace,
            label_selector=label_selector,
        )
        return result.get("items") or []

    # ============================================
    # Jobs
    # ============================================

    def create_job(self, namespace: str, manifest: Manifest) -> Manifest:
        return self._call(
            "create job error",
            self.batch_api().create_namespaced_job,
            namespace=namespace,
            body=manifest,
        )

    def read_job(self, namespace: str, name: str) -> Optional[Manifest]:
        return self._read_or_none(
            "get job error",
            self.batch_api().read_namespaced_job,
            name=name,
            namespace=namespace,
        )

    def list_jobs(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        result = self._call(
            "list jobs error",
            self.batch_api().list_namespaced_job,
            namespace=namespace,
            label_selector=label_selector,
        )
        return result.get("items") or []
