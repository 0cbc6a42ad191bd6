# schemas/student/responses.py
from datetime import datetime
from typing import Optional
from pydantic import Field
from ..common.summaries import ORMModel, ClassSummary, ClassWithTeacher, ParentSummary, ParentContact


class StudentResponse(ORMModel):
    id: int
    name: str
    student_number: Optional[str] = None
    class_id: Optional[int] = None
    parent_id: int
    payment_status: bool
    created_at: datetime
    class_: Optional[ClassSummary] = Field(default=None, serialization_alias="class")
    parent: Optional[ParentSummary] = None


class StudentDetailResponse(StudentResponse):
    class_: Optional[ClassWithTeacher] = Field(default=None, serialization_alias="class")
    parent: Optional[ParentContact] = None
