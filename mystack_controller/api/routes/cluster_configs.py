from fastapi import APIRouter, Depends, Request

from mystack_controller.api.dependencies import get_cluster_service
from mystack_controller.api.routes.clusters import error_response
from mystack_controller.api.schemas import (
    ClusterConfigListResponse,
    ClusterConfigResponse,
    StatusResponse,
)
from mystack_controller.core.errors import MystackError, SpecError
from mystack_controller.core.parser import PARSE_YAML_ERROR

router = APIRouter(prefix="/cluster-configs", tags=["cluster-configs"])


@router.get("", response_model=ClusterConfigListResponse)
def list_cluster_configs(service=Depends(get_cluster_service)):
    return ClusterConfigListResponse(names=service.list_configs())


@router.get("/{name}", response_model=ClusterConfigResponse)
def get_cluster_config(name: str, service=Depends(get_cluster_service)):
    try:
        yaml_text = service.get_config(name)
    except MystackError as e:
        return error_response("Error retrieving cluster config", e)

    return ClusterConfigResponse(name=name, yaml=yaml_text)


@router.put("/{name}/create", response_model=StatusResponse)
async def create_cluster_config(
    name: str,
    request: Request,
    service=Depends(get_cluster_service),
):
    """Body is the raw YAML stack spec."""
    body = await request.body()

    try:
        try:
            yaml_text = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SpecError(PARSE_YAML_ERROR, e) from e
        service.create_config(name, yaml_text)
    except MystackError as e:
        return error_response("Error creating cluster config", e)

    return StatusResponse()


@router.delete("/{name}/remove", response_model=StatusResponse)
def remove_cluster_config(name: str, service=Depends(get_cluster_service)):
    try:
        service.remove_config(name)
    except MystackError as e:
        return error_response("Error removing cluster config", e)

    return StatusResponse()
