from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional


class ParentCreate(BaseModel):
    # payment_status is not accepted here; it is set by recording a payment
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    contact_number: Optional[str] = None
    email: Optional[EmailStr] = None
    # Defaults to the caller's school
    school_id: Optional[int] = None
    user_id: Optional[str] = None


class ParentUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1)
    contact_number: Optional[str] = None
    email: Optional[EmailStr] = None
    user_id: Optional[str] = None
