# pta/schemas/common/summaries.py
"""Nested shapes for the relations each service loads eagerly."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class SchoolSummary(ORMModel):
    id: int
    name: str


class UserSummary(ORMModel):
    id: str
    full_name: Optional[str] = None


class ClassSummary(ORMModel):
    id: int
    name: str
    grade_level: Optional[str] = None


class ClassWithTeacher(ClassSummary):
    teacher: Optional[UserSummary] = None


class ParentSummary(ORMModel):
    id: int
    name: str
    contact_number: Optional[str] = None
    payment_status: bool


class ParentContact(ParentSummary):
    email: Optional[str] = None
    payment_date: Optional[datetime] = None


class ParentWithSchool(ORMModel):
    id: int
    name: str
    school: Optional[SchoolSummary] = None


class StudentSummary(ORMModel):
    id: int
    name: str
    payment_status: bool


class StudentWithClass(StudentSummary):
    class_: Optional[ClassSummary] = Field(default=None, serialization_alias="class")


class StudentWithParent(StudentSummary):
    parent: Optional[ParentSummary] = None


class ParentWithStudents(ORMModel):
    id: int
    name: str
    contact_number: Optional[str] = None
    students: List[StudentSummary] = []


class PaymentSummary(ORMModel):
    id: int
    amount: float
    category: str
    payment_method: str
    created_at: datetime
