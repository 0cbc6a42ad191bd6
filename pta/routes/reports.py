from datetime import datetime
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from pta.core.context import RequestContext
from pta.core.dependencies import get_report_service, get_request_context
from pta.schemas.class_ import ClassDetailResponse
from pta.schemas.parents import ParentResponse
from pta.schemas.reports import SchoolSummaryResponse, TeacherReportClass, PaymentAnalyticsResponse
from pta.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/school-summary", response_model=SchoolSummaryResponse)
async def school_summary(
    school_id: Optional[int] = Query(None),
    context: RequestContext = Depends(get_request_context),
    service: ReportService = Depends(get_report_service),
):
    """Membership, payment and expense totals for the caller's school"""
    return await service.school_summary(context, school_id)


@router.get("/teacher/{teacher_id}", response_model=List[TeacherReportClass])
async def teacher_report(
    teacher_id: str,
    context: RequestContext = Depends(get_request_context),
    service: ReportService = Depends(get_report_service),
):
    return await service.teacher_report(context, teacher_id)


@router.get("/payment-analytics", response_model=PaymentAnalyticsResponse)
async def payment_analytics(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    context: RequestContext = Depends(get_request_context),
    service: ReportService = Depends(get_report_service),
):
    return await service.payment_analytics(context, start_date, end_date)


@router.get("/unpaid-parents", response_model=List[ParentResponse])
async def unpaid_parents(
    context: RequestContext = Depends(get_request_context),
    service: ReportService = Depends(get_report_service),
):
    return await service.unpaid_parents(context)


@router.get("/classes-without-teachers", response_model=List[ClassDetailResponse])
async def classes_without_teachers(
    context: RequestContext = Depends(get_request_context),
    service: ReportService = Depends(get_report_service),
):
    return await service.classes_without_teachers(context)
