from datetime import datetime
from typing import List, Optional
from ..common.summaries import ORMModel, ParentWithSchool, ParentWithStudents, UserSummary


class PaymentResponse(ORMModel):
    id: int
    parent_id: int
    amount: float
    category: str
    payment_method: str
    notes: Optional[str] = None
    receipt_url: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    parent: Optional[ParentWithSchool] = None
    created_by_user: Optional[UserSummary] = None


class PaymentDetailResponse(PaymentResponse):
    parent: Optional[ParentWithStudents] = None


class PaymentStatusUpdateResponse(ORMModel):
    parent_ids: List[int]
    payment_status: bool
    students_updated: int


class PaymentCategoryOption(ORMModel):
    value: str
    label: str
    description: str
    default_amount: float
