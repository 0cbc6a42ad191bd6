from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from pta.core.context import RequestContext
from pta.core.errors import ValidationError
from pta.core.permissions import Entity
from pta.models import Class, Student, UserProfile
from pta.schemas.class_ import ClassCreate, ClassUpdate
from pta.schemas.enums import UserRole
from pta.services.base_service import CRUDService


class ClassService(CRUDService):
    model = Class
    entity = Entity.CLASS
    create_schema = ClassCreate
    update_schema = ClassUpdate
    filter_fields = ("school_id", "teacher_id", "grade_level")
    label = "Class"

    def list_options(self):
        return (selectinload(Class.school), selectinload(Class.teacher))

    def detail_options(self):
        return self.list_options() + (selectinload(Class.students),)

    async def validate_teacher(self, school_id: int, teacher_id: Optional[str]) -> None:
        """A class can only be assigned to a teacher profile of the same school"""
        if teacher_id is None:
            return
        teacher = await self.fetch_one(select(UserProfile).where(UserProfile.id == teacher_id))
        if (
            teacher is None
            or teacher.school_id != school_id
            or UserRole.parse(teacher.role) is not UserRole.TEACHER
        ):
            raise ValidationError("Teacher not found in this school", fields=["teacher_id"])

    async def get_roster(self, context: RequestContext, class_id: int) -> List[Student]:
        """Students of one class; the class must be visible to the caller"""
        class_obj = await self.get_by_id(context, class_id)
        stmt = (
            select(Student)
            .options(selectinload(Student.class_), selectinload(Student.parent))
            .where(Student.class_id == class_obj.id)
            .order_by(Student.name, Student.id)
        )
        return await self.fetch_all(stmt)

    async def prepare_create(self, context: RequestContext, payload: ClassCreate) -> Dict[str, Any]:
        school_id = self.school_for_write(context, payload.school_id)
        await self.validate_teacher(school_id, payload.teacher_id)
        return {
            "name": payload.name,
            "grade_level": payload.grade_level,
            "school_id": school_id,
            "teacher_id": payload.teacher_id,
        }

    async def prepare_update(self, context: RequestContext, obj: Class, changes: Dict[str, Any]) -> Dict[str, Any]:
        if "name" in changes and changes["name"] is None:
            raise ValidationError("Class name cannot be empty", fields=["name"])
        if changes.get("teacher_id") is not None:
            await self.validate_teacher(obj.school_id, changes["teacher_id"])
        return changes
