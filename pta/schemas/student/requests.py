from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class StudentCreate(BaseModel):
    # payment_status is copied from the parent
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    student_number: Optional[str] = None
    # None means "no class assigned"
    class_id: Optional[int] = None
    parent_id: int


class StudentUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    student_number: Optional[str] = None
    class_id: Optional[int] = None
    parent_id: Optional[int] = None
