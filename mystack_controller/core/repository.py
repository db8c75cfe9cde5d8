# mystack_controller/core/repository.py

from abc import ABC, abstractmethod
from typing import List


# Message storage reports for a missing cluster config
NO_ROWS_MESSAGE = "no rows in result set"


class ClusterConfigRepository(ABC):
    """
    Persistence contract for named stack specifications (raw YAML).
    """

    @abstractmethod
    def create(self, name: str, yaml_text: str) -> None:
        """
        Persist a new cluster config.
        Must fail with ConfigAlreadyExistsError if name already exists.
        """
        raise NotImplementedError

    @abstractmethod
    def get_yaml(self, name: str) -> str:
        """
        Fetch the YAML stored under name.
        Raises ConfigNotFoundError("no rows in result set") if missing.
        """
        raise NotImplementedError

    @abstractmethod
    def remove(self, name: str) -> None:
        """
        Delete the config stored under name.
        Raises ConfigNotFoundError if missing.
        """
        raise NotImplementedError

    @abstractmethod
    def list_names(self) -> List[str]:
        """
        All stored config names, sorted.
        """
        raise NotImplementedError
