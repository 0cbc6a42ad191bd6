from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from pta.core.context import RequestContext
from pta.core.dependencies import get_parent_service, get_request_context
from pta.schemas.parents import ParentCreate, ParentUpdate, ParentResponse, ParentDetailResponse
from pta.services.parent_service import ParentService

router = APIRouter(prefix="/parents", tags=["Parents"])


@router.get("", response_model=List[ParentResponse])
async def list_parents(
    school_id: Optional[int] = Query(None),
    payment_status: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Matches name, email or contact number"),
    context: RequestContext = Depends(get_request_context),
    service: ParentService = Depends(get_parent_service),
):
    return await service.get_all(
        context, school_id=school_id, payment_status=payment_status, search=search
    )


@router.get("/me", response_model=ParentDetailResponse)
async def get_my_parent_record(
    context: RequestContext = Depends(get_request_context),
    service: ParentService = Depends(get_parent_service),
):
    """The parent record linked to the signed-in user, with children and payments"""
    return await service.get_by_user(context)


@router.post("", response_model=ParentResponse, status_code=status.HTTP_201_CREATED)
async def create_parent(
    parent_data: ParentCreate,
    context: RequestContext = Depends(get_request_context),
    service: ParentService = Depends(get_parent_service),
):
    return await service.create(context, parent_data)


@router.get("/{parent_id}", response_model=ParentDetailResponse)
async def get_parent(
    parent_id: int,
    context: RequestContext = Depends(get_request_context),
    service: ParentService = Depends(get_parent_service),
):
    return await service.get_by_id(context, parent_id)


@router.put("/{parent_id}", response_model=ParentResponse)
async def update_parent(
    parent_id: int,
    parent_data: ParentUpdate,
    context: RequestContext = Depends(get_request_context),
    service: ParentService = Depends(get_parent_service),
):
    return await service.update(context, parent_id, parent_data)


@router.delete("/{parent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parent(
    parent_id: int,
    context: RequestContext = Depends(get_request_context),
    service: ParentService = Depends(get_parent_service),
):
    """Delete a parent together with its students and payment history"""
    await service.delete(context, parent_id)
