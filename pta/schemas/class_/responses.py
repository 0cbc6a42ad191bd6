from datetime import datetime
from typing import List, Optional
from ..common.summaries import ORMModel, SchoolSummary, UserSummary, StudentSummary


class ClassResponse(ORMModel):
    id: int
    name: str
    grade_level: Optional[str] = None
    school_id: int
    teacher_id: Optional[str] = None
    created_at: datetime
    school: Optional[SchoolSummary] = None
    teacher: Optional[UserSummary] = None


class ClassDetailResponse(ClassResponse):
    students: List[StudentSummary] = []
