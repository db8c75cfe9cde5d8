# mystack_controller/core/platform.py

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


Manifest = Dict[str, Any]


class Platform(ABC):
    """
    Contract for the cluster platform.

    Objects go in and come out as plain dicts in the Kubernetes wire shape
    (camelCase keys). Implementations raise PlatformConflictError when a
    create hits an existing object, PlatformNotFoundError when the object or
    its namespace is missing, and PlatformError for anything else.
    """

    # -------------------------
    # NAMESPACES
    # -------------------------

    @abstractmethod
    def create_namespace(self, name: str, labels: Optional[Dict[str, str]] = None) -> Manifest:
        """
        Create a namespace.
        Must fail with PlatformConflictError if it already exists.
        """
        raise NotImplementedError

    @abstractmethod
    def read_namespace(self, name: str) -> Optional[Manifest]:
        """
        Fetch namespace by name.
        Returns None if not found.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_namespace(self, name: str) -> None:
        """
        Delete a namespace and, by cascade, everything inside it.
        """
        raise NotImplementedError

    # -------------------------
    # DEPLOYMENTS
    # -------------------------

    @abstractmethod
    def create_deployment(self, namespace: str, manifest: Manifest) -> Manifest:
        raise NotImplementedError

    @abstractmethod
    def read_deployment(self, namespace: str, name: str) -> Optional[Manifest]:
        raise NotImplementedError

    @abstractmethod
    def list_deployments(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        raise NotImplementedError

    # -------------------------
    # SERVICES
    # -------------------------

    @abstractmethod
    def create_service(self, namespace: str, manifest: Manifest) -> Manifest:
        raise NotImplementedError

    @abstractmethod
    def list_services(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        raise NotImplementedError

    # -------------------------
    # JOBS
    # -------------------------

    @abstractmethod
    def create_job(self, namespace: str, manifest: Manifest) -> Manifest:
        raise NotImplementedError

    @abstractmethod
    def read_job(self, namespace: str, name: str) -> Optional[Manifest]:
        raise NotImplementedError

    @abstractmethod
    def list_jobs(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        raise NotImplementedError

    # -------------------------
    # HELPERS
    # -------------------------

    def namespace_exists(self, name: str) -> bool:
        return self.read_namespace(name) is not None
