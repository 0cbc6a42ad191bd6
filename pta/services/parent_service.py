from typing import Any, Dict, Optional
from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from pta.core.context import RequestContext
from pta.core.errors import NotFoundError, ValidationError
from pta.core.permissions import Entity
from pta.models import Parent, Student, UserProfile
from pta.schemas.parents import ParentCreate, ParentUpdate
from pta.services.base_service import CRUDService


class ParentService(CRUDService):
    model = Parent
    entity = Entity.PARENT
    create_schema = ParentCreate
    update_schema = ParentUpdate
    filter_fields = ("school_id", "payment_status", "user_id")
    label = "Parent"

    def list_options(self):
        return (
            selectinload(Parent.school),
            selectinload(Parent.students).selectinload(Student.class_),
        )

    def detail_options(self):
        return self.list_options() + (selectinload(Parent.payments),)

    def apply_filters(self, stmt, filters: Dict[str, Any]):
        search = filters.pop("search", None)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(or_(
                Parent.name.ilike(pattern),
                Parent.email.ilike(pattern),
                Parent.contact_number.ilike(pattern),
            ))
        return super().apply_filters(stmt, filters)

    async def get_by_user(self, context: RequestContext) -> Parent:
        """The parent record linked to the caller's own profile"""
        stmt = self.scoped_select(context, self.detail_options()).where(Parent.user_id == context.user_id)
        parent = await self.fetch_one(stmt)
        if parent is None:
            raise NotFoundError("No parent record is linked to this profile")
        return parent

    async def check_email(self, email: Optional[str], exclude_id: Optional[int] = None) -> None:
        if email is None:
            return
        stmt = select(Parent.id).where(Parent.email == email)
        if exclude_id is not None:
            stmt = stmt.where(Parent.id != exclude_id)
        if await self.fetch_one(stmt) is not None:
            raise ValidationError("A parent with this email already exists", fields=["email"])

    async def check_user(self, school_id: int, user_id: Optional[str]) -> None:
        if user_id is None:
            return
        profile = await self.fetch_one(select(UserProfile).where(UserProfile.id == user_id))
        if profile is None or profile.school_id != school_id:
            raise ValidationError("User profile not found in this school", fields=["user_id"])

    async def prepare_create(self, context: RequestContext, payload: ParentCreate) -> Dict[str, Any]:
        school_id = self.school_for_write(context, payload.school_id)
        email = str(payload.email) if payload.email else None
        await self.check_email(email)
        await self.check_user(school_id, payload.user_id)
        return {
            "name": payload.name,
            "contact_number": payload.contact_number,
            "email": email,
            "school_id": school_id,
            "user_id": payload.user_id,
        }

    async def prepare_update(self, context: RequestContext, obj: Parent, changes: Dict[str, Any]) -> Dict[str, Any]:
        if "name" in changes and changes["name"] is None:
            raise ValidationError("Parent name cannot be empty", fields=["name"])
        if changes.get("email") is not None:
            changes["email"] = str(changes["email"])
            await self.check_email(changes["email"], exclude_id=obj.id)
        if changes.get("user_id") is not None:
            await self.check_user(obj.school_id, changes["user_id"])
        return changes
