from datetime import datetime
from typing import List, Optional
from ..common.summaries import ORMModel, SchoolSummary, StudentWithClass, PaymentSummary


class ParentResponse(ORMModel):
    id: int
    name: str
    contact_number: Optional[str] = None
    email: Optional[str] = None
    payment_status: bool
    payment_date: Optional[datetime] = None
    school_id: int
    user_id: Optional[str] = None
    created_at: datetime
    school: Optional[SchoolSummary] = None
    students: List[StudentWithClass] = []


class ParentDetailResponse(ParentResponse):
    payments: List[PaymentSummary] = []
