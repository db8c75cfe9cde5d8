import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mystack_controller.api.dependencies import get_cluster_service, get_username
from mystack_controller.api.schemas import AppsResponse, ErrorResponse, StatusResponse
from mystack_controller.core.errors import ConfigNotFoundError, MystackError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clusters", tags=["clusters"])


def error_response(title: str, error: MystackError) -> JSONResponse:
    body = ErrorResponse(error=title, description=str(error), code=error.code)
    return JSONResponse(status_code=error.status_code, content=body.model_dump())


@router.put("/{name}/run", response_model=StatusResponse)
def run_cluster(
    name: str,
    username: str = Depends(get_username),
    service=Depends(get_cluster_service),
):
    try:
        service.create(username, name)
    except MystackError as e:
        logger.error(f"Error creating cluster '{name}' for {username}: {e}")
        return error_response("Error creating cluster", e)

    return StatusResponse()


@router.put("/{name}/delete", response_model=StatusResponse)
def delete_cluster(
    name: str,
    username: str = Depends(get_username),
    service=Depends(get_cluster_service),
):
    try:
        service.delete(username, name)
    except ConfigNotFoundError as e:
        return error_response("Error retrieving cluster", e)
    except MystackError as e:
        logger.error(f"Error deleting cluster '{name}' for {username}: {e}")
        return error_response("Error deleting cluster", e)

    return StatusResponse()


@router.get("/{name}/apps", response_model=AppsResponse)
def cluster_apps(
    name: str,
    username: str = Depends(get_username),
    service=Depends(get_cluster_service),
):
    try:
        apps = service.apps(username, name)
    except MystackError as e:
        return error_response("Error retrieving apps", e)

    return AppsResponse(apps=apps)
