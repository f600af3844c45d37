from fastapi import APIRouter, Depends
from typing import List, Optional

from appraisal_api.dependencies import get_directory_service
from appraisal_api.models.user import UserRole
from appraisal_api.routers.auth_deps import get_actor
from appraisal_api.schemas.user import DirectoryUser
from appraisal_api.services.directory import DirectoryService

router = APIRouter(
    prefix="/users",
    tags=["Directory"],
    dependencies=[Depends(get_actor)]
)


@router.get("", response_model=List[DirectoryUser])
def list_users(role: Optional[UserRole] = None, service: DirectoryService = Depends(get_directory_service)):
    return service.list_users(role)


@router.get("/{user_id}", response_model=DirectoryUser)
def get_user(user_id: str, service: DirectoryService = Depends(get_directory_service)):
    return service.get_user(user_id)


@router.get("/{user_id}/direct-reports", response_model=List[DirectoryUser])
def direct_reports(user_id: str, service: DirectoryService = Depends(get_directory_service)):
    """People whose line manager is `user_id`."""
    service.get_user(user_id)
    return service.direct_reports(user_id)
