from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from pta.core.context import RequestContext
from pta.core.dependencies import get_expense_service, get_request_context
from pta.schemas.expenses import ExpenseCreate, ExpenseUpdate, ExpenseResponse
from pta.services.expense_service import ExpenseService

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    school_id: Optional[int] = Query(None),
    category: Optional[str] = Query(None),
    context: RequestContext = Depends(get_request_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return await service.get_all(context, school_id=school_id, category=category)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    context: RequestContext = Depends(get_request_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return await service.create(context, expense_data)


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    context: RequestContext = Depends(get_request_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return await service.get_by_id(context, expense_id)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    expense_data: ExpenseUpdate,
    context: RequestContext = Depends(get_request_context),
    service: ExpenseService = Depends(get_expense_service),
):
    return await service.update(context, expense_id, expense_data)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: int,
    context: RequestContext = Depends(get_request_context),
    service: ExpenseService = Depends(get_expense_service),
):
    await service.delete(context, expense_id)
