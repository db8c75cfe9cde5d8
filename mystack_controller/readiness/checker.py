# mystack_controller/readiness/checker.py
"""
Readiness checkers - block until a submitted resource is operational.

Each checker polls the platform every period_seconds until its condition
holds or timeout_seconds have elapsed since the wait started.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Tuple

from mystack_controller.core.config import settings
from mystack_controller.core.errors import (
    ReadinessCancelledError,
    ReadinessFailedError,
    ReadinessTimeoutError,
)
from mystack_controller.core.platform import Manifest, Platform

logger = logging.getLogger(__name__)


class ReadinessChecker(ABC):
    """Blocks until a target is ready or the wait times out."""

    @abstractmethod
    def wait_until_ready(
        self,
        platform: Platform,
        target: Any,
        period_seconds: int,
        timeout_seconds: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Wait for target (a Deployment or Job domain object).

        Raises:
            ReadinessTimeoutError: condition not met before the deadline
            ReadinessFailedError: target reached a terminal failure
            ReadinessCancelledError: cancel_event was set
        """
        raise NotImplementedError


class PollingReadiness(ReadinessChecker):
    """
    Shared poll loop.

    period_seconds == 0 and timeout_seconds == 0 checks exactly once. A zero
    period with a non-zero timeout polls every poll_interval_seconds.
    """

    kind = "resource"

    def __init__(
        self,
        poll_interval_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._poll_interval = (
            poll_interval_seconds if poll_interval_seconds is not None
            else settings.poll_interval_seconds
        )
        self._clock = clock

    @abstractmethod
    def is_ready(self, platform: Platform, target: Any) -> bool:
        raise NotImplementedError

    def wait_until_ready(
        self,
        platform: Platform,
        target: Any,
        period_seconds: int,
        timeout_seconds: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        cancel_event = cancel_event or threading.Event()
        deadline = self._clock() + timeout_seconds
        interval = period_seconds or self._poll_interval
        label = f"{self.kind} {target.namespace}/{target.name}"

        logger.info(
            f"Waiting for {label} (period={period_seconds}s, timeout={timeout_seconds}s)"
        )

        while True:
            if cancel_event.is_set():
                raise ReadinessCancelledError(f"wait for {label} cancelled")

            if self.is_ready(platform, target):
                logger.info(f"{label} is ready")
                return

            remaining = deadline - self._clock()
            if remaining <= 0:
                raise ReadinessTimeoutError(
                    f"timed out after {timeout_seconds}s waiting for {label}"
                )

            logger.debug(f"{label} not ready yet ({remaining:.1f}s left)")
            cancel_event.wait(min(interval, remaining))


class DeploymentReadiness(PollingReadiness):
    """Ready once the rollout is complete: all replicas pass the readiness probe."""

    kind = "deployment"

    def is_ready(self, platform: Platform, target: Any) -> bool:
        deployment = platform.read_deployment(target.namespace, target.name)
        if deployment is None:
            return False
        return deployment_rolled_out(deployment)


class JobReadiness(PollingReadiness):
    """Ready once the job has completed successfully."""

    kind = "job"

    def is_ready(self, platform: Platform, target: Any) -> bool:
        job = platform.read_job(target.namespace, target.name)
        if job is None:
            return False

        status = job.get("status") or {}
        for condition in status.get("conditions") or []:
            if condition.get("type") == "Failed" and condition.get("status") == "True":
                raise ReadinessFailedError(
                    f"job {target.namespace}/{target.name} failed: "
                    f"{condition.get('message') or condition.get('reason') or 'unknown error'}"
                )

        return (status.get("succeeded") or 0) >= 1


class NullReadiness(ReadinessChecker):
    """No-op checker for tests; records each wait it was asked for."""

    def __init__(self):
        self.calls: List[Tuple[Any, int, int]] = []

    def wait_until_ready(
        self,
        platform: Platform,
        target: Any,
        period_seconds: int,
        timeout_seconds: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.calls.append((target, period_seconds, timeout_seconds))


def deployment_rolled_out(deployment: Manifest) -> bool:
    metadata = deployment.get("metadata") or {}
    spec = deployment.get("spec") or {}
    status = deployment.get("status") or {}

    generation = metadata.get("generation")
    observed = status.get("observedGeneration")
    if generation is not None and (observed is None or observed < generation):
        return False

    replicas = spec.get("replicas")
    if replicas is None:
        replicas = 1

    updated = status.get("updatedReplicas") or 0
    ready = status.get("readyReplicas") or 0
    return updated >= replicas and ready >= replicas
