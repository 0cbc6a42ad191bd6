from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from pta.core.context import RequestContext
from pta.core.dependencies import get_request_context, get_user_service
from pta.schemas.enums import UserRole
from pta.schemas.user import UserProfileCreate, UserProfileUpdate, UserProfileResponse
from pta.services.user_service import UserProfileService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserProfileResponse])
async def list_users(
    role: Optional[UserRole] = Query(None),
    school_id: Optional[int] = Query(None),
    context: RequestContext = Depends(get_request_context),
    service: UserProfileService = Depends(get_user_service),
):
    return await service.get_all(context, role=role, school_id=school_id)


@router.post("", response_model=UserProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserProfileCreate,
    context: RequestContext = Depends(get_request_context),
    service: UserProfileService = Depends(get_user_service),
):
    """Create a profile for an identity already registered with the auth provider"""
    return await service.create(context, user_data)


@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user(
    user_id: str,
    context: RequestContext = Depends(get_request_context),
    service: UserProfileService = Depends(get_user_service),
):
    return await service.get_by_id(context, user_id)


@router.put("/{user_id}", response_model=UserProfileResponse)
async def update_user(
    user_id: str,
    user_data: UserProfileUpdate,
    context: RequestContext = Depends(get_request_context),
    service: UserProfileService = Depends(get_user_service),
):
    return await service.update(context, user_id, user_data)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    context: RequestContext = Depends(get_request_context),
    service: UserProfileService = Depends(get_user_service),
):
    await service.delete(context, user_id)
