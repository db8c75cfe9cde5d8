#mystack_controller\infrastructure\postgres\repository.py

"""PostgreSQL cluster config repository using SQLAlchemy."""

import logging
from typing import Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mystack_controller.core.errors import ConfigAlreadyExistsError, ConfigNotFoundError
from mystack_controller.core.repository import NO_ROWS_MESSAGE, ClusterConfigRepository
from mystack_controller.infrastructure.postgres.database import get_session_factory, session_scope
from mystack_controller.infrastructure.postgres.models import ClusterConfigORM

logger = logging.getLogger(__name__)


class PostgresClusterConfigRepository(ClusterConfigRepository):
    """
    Stack specs stored one row per name in the clusters table.

    The session factory is resolved lazily so importing this module never
    opens a database connection.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self._session_factory = session_factory

    def _factory(self) -> Callable[[], Session]:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    # -------------------------
    # WRITE
    # -------------------------

    def create(self, name: str, yaml_text: str) -> None:
        try:
            with session_scope(self._factory()) as session:
                session.add(ClusterConfigORM(name=name, yaml=yaml_text))
        except IntegrityError as e:
            raise ConfigAlreadyExistsError(f"cluster config '{name}' already exists") from e

        logger.info(f"Stored cluster config '{name}'")

    def remove(self, name: str) -> None:
        with session_scope(self._factory()) as session:
            orm = session.execute(
                select(ClusterConfigORM).where(ClusterConfigORM.name == name)
            ).scalar_one_or_none()
            if orm is None:
                raise ConfigNotFoundError(NO_ROWS_MESSAGE)
            session.delete(orm)

        logger.info(f"Removed cluster config '{name}'")

    # -------------------------
    # READ
    # -------------------------

    def get_yaml(self, name: str) -> str:
        if not name:
            raise ConfigNotFoundError(NO_ROWS_MESSAGE)

        with session_scope(self._factory()) as session:
            text = session.execute(
                select(ClusterConfigORM.yaml).where(ClusterConfigORM.name == name)
            ).scalar_one_or_none()

        if text is None:
            raise ConfigNotFoundError(NO_ROWS_MESSAGE)
        return text

    def list_names(self) -> List[str]:
        with session_scope(self._factory()) as session:
            return list(session.execute(
                select(ClusterConfigORM.name).order_by(ClusterConfigORM.name)
            ).scalars())
