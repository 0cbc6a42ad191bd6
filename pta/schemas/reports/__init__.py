# schemas/reports/__init__.py
from .responses import (
    SchoolSummaryResponse,
    TeacherReportClass,
    PaymentBreakdown,
    PaymentAnalyticsResponse,
)
