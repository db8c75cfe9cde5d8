#mystack_controller\infrastructure\postgres\models.py
"""SQLAlchemy ORM models for database tables."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from mystack_controller.infrastructure.postgres.database import Base


class ClusterConfigORM(Base):
    """
    Clusters table - named stack specifications.

    Indexes:
    - Unique index on name (lookup key)
    """

    __tablename__ = "clusters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    yaml = Column(Text, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
