from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from ..enums import UserRole


def assignable_role(value: Optional[UserRole]) -> Optional[UserRole]:
    if value is UserRole.UNKNOWN:
        raise ValueError("role must be one of: " + ", ".join(sorted(r.value for r in UserRole.assignable())))
    return value


class UserProfileCreate(BaseModel):
    """Admin-created profile for an identity that already exists at the auth provider"""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    id: str = Field(min_length=1, max_length=64)
    full_name: Optional[str] = None
    role: UserRole
    # Defaults to the caller's school
    school_id: Optional[int] = None

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return assignable_role(v)


class UserProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    full_name: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return assignable_role(v)


class ProfileSetupRequest(BaseModel):
    """First sign-in; the profile always starts with the parent role"""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    full_name: str = Field(min_length=1)
    school_id: int


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    full_name: str = Field(min_length=1)
