from datetime import datetime
from fastapi import APIRouter, Body, Depends, Query, status
from typing import Any, Dict, List, Optional

from pta.core.context import RequestContext
from pta.core.dependencies import get_payment_service, get_payment_status_service, get_request_context
from pta.schemas.enums import PaymentCategory, PaymentMethod
from pta.schemas.payments import (
    PaymentCreate,
    PaymentStatusUpdate,
    PaymentResponse,
    PaymentDetailResponse,
    PaymentStatusUpdateResponse,
    PaymentCategoryOption,
)
from pta.services.payment_service import PaymentService, payment_categories
from pta.services.payment_status import PaymentStatusService

router = APIRouter(tags=["Payments"])


@router.get("/payments", response_model=List[PaymentResponse])
async def list_payments(
    school_id: Optional[int] = Query(None),
    parent_id: Optional[int] = Query(None),
    category: Optional[PaymentCategory] = Query(None),
    payment_method: Optional[PaymentMethod] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    context: RequestContext = Depends(get_request_context),
    service: PaymentService = Depends(get_payment_service),
):
    """Payments visible to the caller, newest first"""
    return await service.get_all(
        context,
        school_id=school_id,
        parent_id=parent_id,
        category=category,
        payment_method=payment_method,
        start_date=start_date,
        end_date=end_date,
    )


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payment_data: PaymentCreate,
    context: RequestContext = Depends(get_request_context),
    service: PaymentService = Depends(get_payment_service),
):
    """Record a payment; the parent and all of its students become paid"""
    return await service.create(context, payment_data)


@router.post("/payments/status", response_model=PaymentStatusUpdateResponse)
async def set_payment_status(
    status_data: PaymentStatusUpdate,
    context: RequestContext = Depends(get_request_context),
    service: PaymentStatusService = Depends(get_payment_status_service),
):
    """Admin override of the paid flag, e.g. to reset parents for a new billing cycle"""
    return await service.set_status(context, status_data)


@router.get("/payments/{payment_id}", response_model=PaymentDetailResponse)
async def get_payment(
    payment_id: int,
    context: RequestContext = Depends(get_request_context),
    service: PaymentService = Depends(get_payment_service),
):
    return await service.get_by_id(context, payment_id)


@router.put("/payments/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: int,
    payment_data: Dict[str, Any] = Body(default_factory=dict),
    context: RequestContext = Depends(get_request_context),
    service: PaymentService = Depends(get_payment_service),
):
    """Always refused: payments are append-only"""
    return await service.update(context, payment_id, payment_data)


@router.delete("/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: int,
    context: RequestContext = Depends(get_request_context),
    service: PaymentService = Depends(get_payment_service),
):
    """Always refused: payments are append-only"""
    await service.delete(context, payment_id)


@router.get("/payment-categories", response_model=List[PaymentCategoryOption])
async def list_payment_categories():
    return payment_categories()
