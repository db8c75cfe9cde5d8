# mystack_controller/infrastructure/memory/repository.py

from threading import Lock
from typing import Dict, List

from mystack_controller.core.errors import ConfigAlreadyExistsError, ConfigNotFoundError
from mystack_controller.core.repository import NO_ROWS_MESSAGE, ClusterConfigRepository


class InMemoryClusterConfigRepository(ClusterConfigRepository):
    def __init__(self, configs: Dict[str, str] | None = None):
        self._store: Dict[str, str] = dict(configs or {})
        self._lock = Lock()

    def create(self, name: str, yaml_text: str) -> None:
        with self._lock:
            if name in self._store:
                raise ConfigAlreadyExistsError(f"cluster config '{name}' already exists")
            self._store[name] = yaml_text

    def get_yaml(self, name: str) -> str:
        if not name or name not in self._store:
            raise ConfigNotFoundError(NO_ROWS_MESSAGE)
        return self._store[name]

    def remove(self, name: str) -> None:
        with self._lock:
            if name not in self._store:
                raise ConfigNotFoundError(NO_ROWS_MESSAGE)
            del self._store[name]

    def list_names(self) -> List[str]:
        return sorted(self._store)
