from typing import Any, Dict, Optional
from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from pta.core.context import RequestContext
from pta.core.errors import ValidationError
from pta.core.permissions import Entity
from pta.models import Class, Parent, Student
from pta.schemas.student import StudentCreate, StudentUpdate
from pta.services.base_service import CRUDService


class StudentService(CRUDService):
    model = Student
    entity = Entity.STUDENT
    create_schema = StudentCreate
    update_schema = StudentUpdate
    filter_fields = ("class_id", "parent_id", "payment_status")
    label = "Student"

    def list_options(self):
        return (selectinload(Student.class_), selectinload(Student.parent))

    def detail_options(self):
        return (
            selectinload(Student.class_).selectinload(Class.teacher),
            selectinload(Student.parent),
        )

    def apply_filters(self, stmt, filters: Dict[str, Any]):
        # Students carry no school column; the school is the parent's
        school_id = filters.pop("school_id", None)
        if school_id is not None:
            stmt = stmt.where(Student.parent_id.in_(
                select(Parent.id).where(Parent.school_id == school_id)
            ))
        search = filters.pop("search", None)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(or_(Student.name.ilike(pattern), Student.student_number.ilike(pattern)))
        return super().apply_filters(stmt, filters)

    async def parent_in_school(self, context: RequestContext, parent_id: int) -> Parent:
        parent = await self.fetch_one(select(Parent).where(Parent.id == parent_id))
        if parent is None or parent.school_id != context.school_id:
            raise ValidationError("Parent not found in this school", fields=["parent_id"])
        return parent

    async def check_class(self, context: RequestContext, class_id: Optional[int]) -> None:
        if class_id is None:
            return
        class_obj = await self.fetch_one(select(Class).where(Class.id == class_id))
        if class_obj is None or class_obj.school_id != context.school_id:
            raise ValidationError("Class not found in this school", fields=["class_id"])

    async def check_student_number(self, number: Optional[str], exclude_id: Optional[int] = None) -> None:
        if not number:
            return
        stmt = select(Student.id).where(Student.student_number == number)
        if exclude_id is not None:
            stmt = stmt.where(Student.id != exclude_id)
        if await self.fetch_one(stmt) is not None:
            raise ValidationError("Student number already in use", fields=["student_number"])

    async def prepare_create(self, context: RequestContext, payload: StudentCreate) -> Dict[str, Any]:
        parent = await self.parent_in_school(context, payload.parent_id)
        await self.check_class(context, payload.class_id)
        await self.check_student_number(payload.student_number)
        return {
            "name": payload.name,
            "student_number": payload.student_number,
            "class_id": payload.class_id,
            "parent_id": parent.id,
            # A new child joins the parent's current billing state
            "payment_status": bool(parent.payment_status),
        }

    async def prepare_update(self, context: RequestContext, obj: Student, changes: Dict[str, Any]) -> Dict[str, Any]:
        if "name" in changes and changes["name"] is None:
            raise ValidationError("Student name cannot be empty", fields=["name"])
        if "parent_id" in changes:
            if changes["parent_id"] is None:
                raise ValidationError("A student must have a parent", fields=["parent_id"])
            if changes["parent_id"] != obj.parent_id:
                parent = await self.parent_in_school(context, changes["parent_id"])
                changes["payment_status"] = bool(parent.payment_status)
        if changes.get("class_id") is not None:
            await self.check_class(context, changes["class_id"])
        if changes.get("student_number"):
            await self.check_student_number(changes["student_number"], exclude_id=obj.id)
        return changes
