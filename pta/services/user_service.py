from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from pta.core.context import RequestContext
from pta.core.errors import ConflictError, NotFoundError, ValidationError
from pta.core.logging import logger
from pta.core.permissions import Entity
from pta.models import School, UserProfile
from pta.schemas.enums import UserRole
from pta.schemas.user import (
    ProfileSetupRequest,
    ProfileUpdateRequest,
    UserProfileCreate,
    UserProfileUpdate,
)
from pta.services.base_service import CRUDService


class UserProfileService(CRUDService):
    model = UserProfile
    entity = Entity.USER_PROFILE
    create_schema = UserProfileCreate
    update_schema = UserProfileUpdate
    filter_fields = ("school_id", "role")
    label = "User profile"

    def list_options(self):
        return (selectinload(UserProfile.school),)

    def ordering(self):
        return (UserProfile.full_name, UserProfile.id)

    def apply_filters(self, stmt, filters: Dict[str, Any]):
        role = filters.get("role")
        if role is not None:
            filters = {**filters, "role": UserRole.parse(role).value}
        return super().apply_filters(stmt, filters)

    async def find(self, user_id: str) -> Optional[UserProfile]:
        stmt = (
            select(UserProfile)
            .options(*self.list_options())
            .where(UserProfile.id == user_id)
            .execution_options(populate_existing=True)
        )
        return await self.fetch_one(stmt)

    async def resolve_context(self, user_id: str) -> RequestContext:
        """
        Build the caller's context from its stored profile.

        A signed-in identity without a profile, or with a role outside the
        known set, resolves to ``UserRole.UNKNOWN``.
        """
        profile = await self.find(user_id)
        if profile is None:
            return RequestContext.build(user_id, UserRole.UNKNOWN)
        context = RequestContext.build(profile.id, profile.role, profile.school_id)
        if not context.is_known:
            logger.warning(f"User {user_id} has unrecognised role {profile.role!r}")
        return context

    async def ensure_school(self, school_id: int) -> None:
        school = await self.fetch_one(select(School).where(School.id == school_id))
        if school is None:
            raise ValidationError("School not found", fields=["school_id"])

    async def prepare_create(self, context: RequestContext, payload: UserProfileCreate) -> Dict[str, Any]:
        school_id = self.school_for_write(context, payload.school_id)
        if await self.find(payload.id) is not None:
            raise ConflictError(f"User profile {payload.id} already exists")
        return {
            "id": payload.id,
            "full_name": payload.full_name,
            "role": payload.role.value,
            "school_id": school_id,
        }

    async def prepare_update(self, context: RequestContext, obj: UserProfile, changes: Dict[str, Any]) -> Dict[str, Any]:
        if "role" in changes:
            if changes["role"] is None:
                raise ValidationError("Role cannot be empty", fields=["role"])
            changes["role"] = changes["role"].value
        return changes

    async def get_own_profile(self, context: RequestContext) -> UserProfile:
        profile = await self.find(context.user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def setup_own_profile(self, context: RequestContext, data) -> UserProfile:
        """First sign-in: create the caller's own profile with the parent role"""
        payload = self.validate(ProfileSetupRequest, data)
        if await self.find(context.user_id) is not None:
            raise ConflictError("Profile already exists")
        await self.ensure_school(payload.school_id)

        async with self.transaction():
            self.db.add(UserProfile(
                id=context.user_id,
                full_name=payload.full_name,
                role=UserRole.PARENT.value,
                school_id=payload.school_id,
            ))

        logger.info(f"Profile created for user {context.user_id} in school {payload.school_id}")
        return await self.get_own_profile(context)

    async def update_own_profile(self, context: RequestContext, data) -> UserProfile:
        payload = self.validate(ProfileUpdateRequest, data)
        profile = await self.get_own_profile(context)

        async with self.transaction():
            profile.full_name = payload.full_name

        return await self.get_own_profile(context)
