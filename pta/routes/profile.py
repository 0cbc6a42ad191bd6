from fastapi import APIRouter, Depends, status

from pta.core.context import RequestContext
from pta.core.dependencies import get_request_context, get_user_service
from pta.schemas.user import ProfileSetupRequest, ProfileUpdateRequest, UserProfileResponse
from pta.services.user_service import UserProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=UserProfileResponse)
async def get_profile(
    context: RequestContext = Depends(get_request_context),
    service: UserProfileService = Depends(get_user_service),
):
    return await service.get_own_profile(context)


@router.post("", response_model=UserProfileResponse, status_code=status.HTTP_201_CREATED)
async def setup_profile(
    profile_data: ProfileSetupRequest,
    context: RequestContext = Depends(get_request_context),
    service: UserProfileService = Depends(get_user_service),
):
    """
    First sign-in: create the caller's own profile.

    New profiles always start with the parent role; an admin can change it later.
    """
    return await service.setup_own_profile(context, profile_data)


@router.put("", response_model=UserProfileResponse)
async def update_profile(
    profile_data: ProfileUpdateRequest,
    context: RequestContext = Depends(get_request_context),
    service: UserProfileService = Depends(get_user_service),
):
    return await service.update_own_profile(context, profile_data)
