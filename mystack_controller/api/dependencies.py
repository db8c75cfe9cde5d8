#mystack_controller\api\dependencies.py
import re

from fastapi import Header, HTTPException

from mystack_controller.orchestrator.service import ClusterService


EMAIL_HEADER = "X-Forwarded-Email"


def get_cluster_service() -> ClusterService:
    from mystack_controller.container import cluster_service
    return cluster_service


def email_to_username(email: str) -> str:
    """Local part of the email, squeezed into a DNS label."""
    local_part = email.split("@", 1)[0].lower()
    return re.sub(r"[^a-z0-9-]+", "-", local_part).strip("-")


def get_username(x_forwarded_email: str | None = Header(default=None)) -> str:
    if not x_forwarded_email:
        raise HTTPException(status_code=401, detail=f"{EMAIL_HEADER} header is required")

    username = email_to_username(x_forwarded_email)
    if not username:
        raise HTTPException(status_code=401, detail=f"invalid email {x_forwarded_email!r}")
    return username
