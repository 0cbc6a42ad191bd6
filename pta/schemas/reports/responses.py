from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel
from ..common.summaries import ORMModel, StudentWithParent


class SchoolSummaryResponse(BaseModel):
    school_id: int
    total_parents: int
    paid_parents: int
    payment_rate: float
    total_students: int
    paid_students: int
    total_classes: int
    total_payments: int
    total_amount: float
    average_payment: float
    total_expenses: float
    net_balance: float


class TeacherReportClass(ORMModel):
    id: int
    name: str
    grade_level: Optional[str] = None
    students: List[StudentWithParent] = []


class PaymentBreakdown(BaseModel):
    count: int
    total: float


class PaymentAnalyticsResponse(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    payment_count: int
    total_amount: float
    by_category: Dict[str, PaymentBreakdown]
    by_method: Dict[str, PaymentBreakdown]
