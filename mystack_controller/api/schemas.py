from typing import List
from pydantic import BaseModel


class StatusResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str
    description: str
    code: str


class AppsResponse(BaseModel):
    apps: List[str]


class ClusterConfigResponse(BaseModel):
    name: str
    yaml: str


class ClusterConfigListResponse(BaseModel):
    names: List[str]
