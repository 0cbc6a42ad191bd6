# schemas/user/__init__.py
from .requests import (
    UserProfileCreate,
    UserProfileUpdate,
    ProfileSetupRequest,
    ProfileUpdateRequest,
)
from .responses import UserProfileResponse
