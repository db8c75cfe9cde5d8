#tests\conftest.py

"""Pytest configuration and fixtures."""

import pytest

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from mystack_controller.core.models import EnvVar, PortMap, Probe, Setup
from mystack_controller.domain.deployment import Deployment
from mystack_controller.domain.job import Job
from mystack_controller.domain.service import Service
from mystack_controller.infrastructure.memory.platform import InMemoryPlatform
from mystack_controller.infrastructure.memory.repository import InMemoryClusterConfigRepository
from mystack_controller.infrastructure.postgres.database import get_session_factory, init_db
from mystack_controller.infrastructure.postgres.repository import PostgresClusterConfigRepository
from mystack_controller.orchestrator.cluster import Cluster
from mystack_controller.readiness.checker import NullReadiness


CLUSTER_NAME = "MyCustomApps"

YAML_DEFAULT_TIMES = """
setup:
  image: setup-img
services:
  test0:
    image: svc1
    ports:
      - "5000"
      - "5001:5002"
    readiness-probe:
      command:
        - echo
        - ready
apps:
  test1:
    image: app1
    ports:
      - "5000"
      - "5001:5002"
  test2:
    image: app2
    ports:
      - "5000"
      - "5001:5002"
  test3:
    image: app3
    ports:
      - "5000"
      - "5001:5002"
    env:
      - name: VARIABLE_1
        value: 100
"""

YAML_EXPLICIT_TIMES = """
setup:
  image: setup-img
  timeout-seconds: 180
  period-seconds: 10
services:
  test0:
    image: svc1
    ports:
      - "5000"
      - "5001:5002"
    readiness-probe:
      command:
        - echo
        - ready
      period-seconds: 10
      start-deployment-timeout-seconds: 180
apps:
  test1:
    image: app1
    ports:
      - "5000"
      - "5001:5002"
  test2:
    image: app2
    ports:
      - "5000"
      - "5001:5002"
  test3:
    image: app3
    ports:
      - "5000"
      - "5001:5002"
    env:
      - name: VARIABLE_1
        value: 100
"""

INVALID_YAML_FIRST_SEGMENT = """
services:
  postgres:
    image: postgres:1.0
    ports:
      - 8!asd
apps:
  app1:
    image: app1
    ports:
      - 5000:5001
"""

INVALID_YAML_SECOND_SEGMENT = """
services:
  postgres:
    image: postgres:1.0
    ports:
      - 8585:8!asd
apps:
  app1:
    image: app1
    ports:
      - 5000:5001
"""

CONTAINER_PORTS = [5000, 5002]
PORT_MAPS = [
    PortMap(port=5000, target_port=5000),
    PortMap(port=5001, target_port=5002),
]


def build_mock_cluster(period: int, timeout: int, username: str, **kwargs) -> Cluster:
    """The cluster YAML_DEFAULT_TIMES / YAML_EXPLICIT_TIMES describe."""
    return Cluster(
        username=username,
        app_deployments=[
            Deployment("test1", username, "app1", list(CONTAINER_PORTS)),
            Deployment("test2", username, "app2", list(CONTAINER_PORTS)),
            Deployment("test3", username, "app3", list(CONTAINER_PORTS), [
                EnvVar(name="VARIABLE_1", value="100"),
            ]),
        ],
        svc_deployments=[
            Deployment(
                "test0",
                username,
                "svc1",
                list(CONTAINER_PORTS),
                [],
                Probe(command=["echo", "ready"], period_seconds=period, timeout_seconds=timeout),
            ),
        ],
        app_services=[
            Service("test1", username, list(PORT_MAPS)),
            Service("test2", username, list(PORT_MAPS)),
            Service("test3", username, list(PORT_MAPS)),
        ],
        svc_services=[
            Service("test0", username, list(PORT_MAPS)),
        ],
        job=kwargs.pop("job", Job(
            username=username,
            setup=Setup(image="setup-img", period_seconds=period, timeout_seconds=timeout),
            env=[EnvVar(name="VARIABLE_1", value="100")],
        )),
        deployment_readiness=kwargs.pop("deployment_readiness", NullReadiness()),
        job_readiness=kwargs.pop("job_readiness", NullReadiness()),
        **kwargs,
    )


@pytest.fixture
def mock_cluster():
    return build_mock_cluster


@pytest.fixture
def platform():
    """Fresh in-memory platform for each test."""
    return InMemoryPlatform()


@pytest.fixture
def config_repo():
    return InMemoryClusterConfigRepository({
        CLUSTER_NAME: YAML_DEFAULT_TIMES,
        "explicit-times": YAML_EXPLICIT_TIMES,
        "invalid-first": INVALID_YAML_FIRST_SEGMENT,
        "invalid-second": INVALID_YAML_SECOND_SEGMENT,
    })


@pytest.fixture
def test_engine():
    """SQLite engine shared across connections of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def sql_repo(test_engine):
    """Postgres repository running on the SQLite test engine."""
    return PostgresClusterConfigRepository(session_factory=get_session_factory(test_engine))
