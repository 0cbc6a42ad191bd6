from fastapi import APIRouter, Depends, status
from typing import List

from pta.core.context import RequestContext
from pta.core.dependencies import get_request_context, get_school_service
from pta.schemas.school import SchoolCreate, SchoolUpdate, SchoolResponse
from pta.services.school_service import SchoolService

router = APIRouter(prefix="/schools", tags=["Schools"])


@router.get("", response_model=List[SchoolResponse])
async def list_schools(
    context: RequestContext = Depends(get_request_context),
    service: SchoolService = Depends(get_school_service),
):
    """Schools visible to the caller (its own)"""
    return await service.get_all(context)


@router.post("", response_model=SchoolResponse, status_code=status.HTTP_201_CREATED)
async def create_school(
    school_data: SchoolCreate,
    context: RequestContext = Depends(get_request_context),
    service: SchoolService = Depends(get_school_service),
):
    return await service.create(context, school_data)


@router.get("/{school_id}", response_model=SchoolResponse)
async def get_school(
    school_id: int,
    context: RequestContext = Depends(get_request_context),
    service: SchoolService = Depends(get_school_service),
):
    return await service.get_by_id(context, school_id)


@router.put("/{school_id}", response_model=SchoolResponse)
async def update_school(
    school_id: int,
    school_data: SchoolUpdate,
    context: RequestContext = Depends(get_request_context),
    service: SchoolService = Depends(get_school_service),
):
    return await service.update(context, school_id, school_data)


@router.delete("/{school_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_school(
    school_id: int,
    context: RequestContext = Depends(get_request_context),
    service: SchoolService = Depends(get_school_service),
):
    """Delete a school with all of its classes, parents, students, payments and profiles"""
    await service.delete(context, school_id)
