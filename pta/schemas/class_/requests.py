from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ClassCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    grade_level: Optional[str] = None
    # Defaults to the caller's school
    school_id: Optional[int] = None
    teacher_id: Optional[str] = None


class ClassUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    grade_level: Optional[str] = None
    # Explicit null unassigns the teacher
    teacher_id: Optional[str] = None
