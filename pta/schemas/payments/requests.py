from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from ..enums import PaymentCategory, PaymentMethod


class PaymentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    parent_id: int
    # When omitted, the category's default amount is used
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: PaymentCategory = PaymentCategory.MEMBERSHIP
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: Optional[str] = None
    receipt_url: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    """Administrative override of the paid flag"""
    model_config = ConfigDict(extra="forbid")

    parent_ids: List[int] = Field(min_length=1)
    payment_status: bool
