"""Test readiness polling for Deployments and Jobs."""

import itertools
import threading

import pytest

from mystack_controller.core.errors import (
    ReadinessCancelledError,
    ReadinessFailedError,
    ReadinessTimeoutError,
)
from mystack_controller.core.models import Probe, Setup
from mystack_controller.domain.deployment import Deployment
from mystack_controller.domain.job import Job
from mystack_controller.infrastructure.memory.platform import (
    DEPLOYMENTS,
    JOBS,
    InMemoryPlatform,
)
from mystack_controller.readiness.checker import (
    DeploymentReadiness,
    JobReadiness,
    deployment_rolled_out,
)


NAMESPACE = "mystack-user"

ROLLED_OUT = {"observedGeneration": 1, "updatedReplicas": 1, "readyReplicas": 1}
SUCCEEDED = {"succeeded": 1}


class CountingPlatform(InMemoryPlatform):
    """Marks the target ready once it has been read ready_after times."""

    def __init__(self, kind, status, ready_after):
        super().__init__()
        self.kind = kind
        self.status = status
        self.ready_after = ready_after
        self.reads = 0

    def _read(self, kind, namespace, name):
        if kind == self.kind:
            self.reads += 1
            if self.reads == self.ready_after:
                self.set_status(kind, namespace, name, self.status)
        return super()._read(kind, namespace, name)


def submit_job(platform):
    platform.create_namespace(NAMESPACE)
    job = Job(username="user", setup=Setup(image="setup-img"))
    job.submit(platform)
    return job


def submit_deployment(platform):
    platform.create_namespace(NAMESPACE)
    deployment = Deployment("db", "user", "postgres", [5432], probe=Probe(command=["true"]))
    deployment.submit(platform)
    return deployment


class TestJobReadiness:
    """Test waiting for the setup job."""

    def test_succeeded_job_is_ready(self, platform):
        job = submit_job(platform)
        platform.set_status(JOBS, NAMESPACE, "setup", SUCCEEDED)

        JobReadiness(poll_interval_seconds=0.01).wait_until_ready(platform, job, 0, 0)

    def test_zero_timing_checks_once(self):
        platform = CountingPlatform(JOBS, SUCCEEDED, ready_after=2)
        job = submit_job(platform)

        with pytest.raises(ReadinessTimeoutError):
            JobReadiness(poll_interval_seconds=0.01).wait_until_ready(platform, job, 0, 0)

        assert platform.reads == 1

    def test_becomes_ready_while_waiting(self):
        platform = CountingPlatform(JOBS, SUCCEEDED, ready_after=3)
        job = submit_job(platform)

        JobReadiness(poll_interval_seconds=0.01).wait_until_ready(platform, job, 0, 5)

        assert platform.reads == 3

    def test_failed_job_aborts(self, platform):
        job = submit_job(platform)
        platform.set_status(JOBS, NAMESPACE, "setup", {
            "failed": 1,
            "conditions": [
                {"type": "Failed", "status": "True", "reason": "BackoffLimitExceeded"},
            ],
        })

        with pytest.raises(ReadinessFailedError) as exc_info:
            JobReadiness(poll_interval_seconds=0.01).wait_until_ready(platform, job, 1, 60)

        assert "BackoffLimitExceeded" in str(exc_info.value)

    def test_timeout(self, platform):
        job = submit_job(platform)
        clock = itertools.count(0, 1).__next__

        checker = JobReadiness(poll_interval_seconds=0.01, clock=clock)
        with pytest.raises(ReadinessTimeoutError) as exc_info:
            checker.wait_until_ready(platform, job, 0, 5)

        assert "job mystack-user/setup" in str(exc_info.value)

    def test_cancelled(self, platform):
        job = submit_job(platform)
        cancel_event = threading.Event()
        cancel_event.set()

        with pytest.raises(ReadinessCancelledError):
            JobReadiness(poll_interval_seconds=0.01).wait_until_ready(
                platform, job, 1, 60, cancel_event=cancel_event
            )

    def test_missing_job_not_ready(self, platform):
        platform.create_namespace(NAMESPACE)
        job = Job(username="user", setup=Setup(image="setup-img"))

        with pytest.raises(ReadinessTimeoutError):
            JobReadiness(poll_interval_seconds=0.01).wait_until_ready(platform, job, 0, 0)


class TestDeploymentReadiness:
    """Test waiting for probed service deployments."""

    def test_rolled_out_deployment_is_ready(self, platform):
        deployment = submit_deployment(platform)
        platform.set_status(DEPLOYMENTS, NAMESPACE, "db", ROLLED_OUT)

        DeploymentReadiness(poll_interval_seconds=0.01).wait_until_ready(
            platform, deployment, 0, 0
        )

    def test_fresh_deployment_not_ready(self, platform):
        deployment = submit_deployment(platform)

        with pytest.raises(ReadinessTimeoutError):
            DeploymentReadiness(poll_interval_seconds=0.01).wait_until_ready(
                platform, deployment, 0, 0
            )

    def test_becomes_ready_while_waiting(self):
        platform = CountingPlatform(DEPLOYMENTS, ROLLED_OUT, ready_after=2)
        deployment = submit_deployment(platform)

        DeploymentReadiness(poll_interval_seconds=0.01).wait_until_ready(
            platform, deployment, 0, 5
        )

        assert platform.reads == 2


class TestRolloutCondition:

    def test_stale_generation(self):
        assert not deployment_rolled_out({
            "metadata": {"generation": 2},
            "spec": {"replicas": 1},
            "status": {"observedGeneration": 1, "updatedReplicas": 1, "readyReplicas": 1},
        })

    def test_replicas_not_ready(self):
        assert not deployment_rolled_out({
            "spec": {"replicas": 2},
            "status": {"updatedReplicas": 2, "readyReplicas": 1},
        })

    def test_replicas_default_to_one(self):
        assert deployment_rolled_out({"status": {"updatedReplicas": 1, "readyReplicas": 1}})

    def test_no_status(self):
        assert not deployment_rolled_out({"spec": {"replicas": 1}})
