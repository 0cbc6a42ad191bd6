from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ExpenseCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: str = Field(min_length=1, max_length=50)
    receipt_url: Optional[str] = None
    notes: Optional[str] = None
    # Defaults to the caller's school
    school_id: Optional[int] = None


class ExpenseUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    receipt_url: Optional[str] = None
    notes: Optional[str] = None
