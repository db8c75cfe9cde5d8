# mystack_controller/infrastructure/memory/platform.py
"""In-process platform emulating the namespace-scoped Kubernetes API."""

import copy
from threading import Lock
from typing import Dict, List, Optional

from mystack_controller.core.errors import PlatformConflictError, PlatformNotFoundError
from mystack_controller.core.platform import Manifest, Platform


DEPLOYMENTS = "deployments"
SERVICES = "services"
JOBS = "jobs"


def _matches(labels: Dict[str, str], label_selector: str) -> bool:
    """Equality-based selectors only: "a=b,c=d"."""
    for requirement in filter(None, (part.strip() for part in label_selector.split(","))):
        key, _, value = requirement.partition("=")
        if labels.get(key.strip()) != value.strip():
            return False
    return True


class InMemoryPlatform(Platform):
    """
    Keeps every object in dicts guarded by one lock.

    Mirrors the API server's rules the orchestrator relies on: names are
    unique per kind and namespace, creates into a missing namespace fail, and
    deleting a namespace removes everything inside it.
    """

    def __init__(self):
        self._namespaces: Dict[str, Manifest] = {}
        self._objects: Dict[str, Dict[str, Dict[str, Manifest]]] = {}
        self._lock = Lock()

    # -------------------------
    # NAMESPACES
    # -------------------------

    def create_namespace(self, name: str, labels: Optional[Dict[str, str]] = None) -> Manifest:
        with self._lock:
            if name in self._namespaces:
                raise PlatformConflictError(
                    "create namespace error", f'namespaces "{name}" already exists'
                )
            namespace = {
                "apiVersion": "v1",
                "kind": "Namespace",
                "metadata": {"name": name, "labels": dict(labels or {})},
                "status": {"phase": "Active"},
            }
            self._namespaces[name] = namespace
            self._objects[name] = {DEPLOYMENTS: {}, SERVICES: {}, JOBS: {}}
            return copy.deepcopy(namespace)

    def read_namespace(self, name: str) -> Optional[Manifest]:
        with self._lock:
            namespace = self._namespaces.get(name)
            return copy.deepcopy(namespace) if namespace else None

    def delete_namespace(self, name: str) -> None:
        with self._lock:
            if name not in self._namespaces:
                raise PlatformNotFoundError(
                    "delete namespace error", f'namespaces "{name}" not found'
                )
            del self._namespaces[name]
            del self._objects[name]

    # -------------------------
    # DEPLOYMENTS
    # -------------------------

    def create_deployment(self, namespace: str, manifest: Manifest) -> Manifest:
        return self._create(DEPLOYMENTS, namespace, manifest)

    def read_deployment(self, namespace: str, name: str) -> Optional[Manifest]:
        return self._read(DEPLOYMENTS, namespace, name)

    def list_deployments(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        return self._list(DEPLOYMENTS, namespace, label_selector)

    # -------------------------
    # SERVICES
    # -------------------------

    def create_service(self, namespace: str, manifest: Manifest) -> Manifest:
        return self._create(SERVICES, namespace, manifest)

    def list_services(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        return self._list(SERVICES, namespace, label_selector)

    # -------------------------
    # JOBS
    # -------------------------

    def create_job(self, namespace: str, manifest: Manifest) -> Manifest:
        return self._create(JOBS, namespace, manifest)

    def read_job(self, namespace: str, name: str) -> Optional[Manifest]:
        return self._read(JOBS, namespace, name)

    def list_jobs(self, namespace: str, label_selector: str = "") -> List[Manifest]:
        return self._list(JOBS, namespace, label_selector)

    # -------------------------
    # TEST HOOKS
    # -------------------------

    def set_status(self, kind: str, namespace: str, name: str, status: Dict) -> None:
        """Replace the status block of a stored object (what controllers would do)."""
        with self._lock:
            self._objects[namespace][kind][name]["status"] = copy.deepcopy(status)

    # -------------------------
    # HELPERS
    # -------------------------

    def _create(self, kind: str, namespace: str, manifest: Manifest) -> Manifest:
        name = manifest["metadata"]["name"]
        with self._lock:
            if namespace not in self._namespaces:
                raise PlatformNotFoundError(
                    f"create {kind} error", f'namespaces "{namespace}" not found'
                )
            objects = self._objects[namespace][kind]
            if name in objects:
                raise PlatformConflictError(
                    f"create {kind} error", f'{kind} "{name}" already exists'
                )
            stored = copy.deepcopy(manifest)
            stored["metadata"]["namespace"] = namespace
            stored.setdefault("status", {})
            objects[name] = stored
            return copy.deepcopy(stored)

    def _read(self, kind: str, namespace: str, name: str) -> Optional[Manifest]:
        with self._lock:
            found = self._objects.get(namespace, {}).get(kind, {}).get(name)
            return copy.deepcopy(found) if found else None

    def _list(self, kind: str, namespace: str, label_selector: str) -> List[Manifest]:
        # Like the API server, listing a missing namespace yields nothing
        with self._lock:
            objects = self._objects.get(namespace, {}).get(kind, {})
            return [
                copy.deepcopy(obj) for obj in objects.values()
                if _matches(obj["metadata"].get("labels") or {}, label_selector)
            ]
