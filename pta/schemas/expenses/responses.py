from datetime import datetime
from typing import Optional
from ..common.summaries import ORMModel, SchoolSummary, UserSummary


class ExpenseResponse(ORMModel):
    id: int
    description: str
    amount: float
    category: str
    receipt_url: Optional[str] = None
    notes: Optional[str] = None
    school_id: int
    created_by: Optional[str] = None
    created_at: datetime
    school: Optional[SchoolSummary] = None
    created_by_user: Optional[UserSummary] = None
