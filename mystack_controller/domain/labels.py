# mystack_controller/domain/labels.py
"""Naming and label conventions shared by every rendered resource."""

import re
from typing import Dict

from mystack_controller.core.errors import SpecError

NAMESPACE_PREFIX = "mystack-"

APP_LABEL = "app"
HERITAGE_LABEL = "heritage"
HERITAGE = "mystack"
OWNER_LABEL = "mystack/owner"
ROUTABLE_LABEL = "mystack/routable"

ROUTABLE_SELECTOR = f"{ROUTABLE_LABEL}=true"


def username_to_namespace(username: str) -> str:
    return f"{NAMESPACE_PREFIX}{username}"


def workload_labels(name: str, username: str) -> Dict[str, str]:
    return {
        APP_LABEL: name,
        HERITAGE_LABEL: HERITAGE,
        OWNER_LABEL: username,
    }


_DNS_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


def validate_dns_label(value: str, kind: str) -> None:
    """Reject names the platform would refuse (RFC 1123 label, 63 chars max)."""
    if len(value) > 63 or not _DNS_LABEL.match(value):
        raise SpecError(
            "parse yaml error",
            f"invalid {kind} name {value!r}: must be a lowercase RFC 1123 label",
        )
