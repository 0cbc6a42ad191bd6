from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from pta.core.context import RequestContext
from pta.core.dependencies import get_request_context, get_student_service
from pta.schemas.student import StudentCreate, StudentUpdate, StudentResponse, StudentDetailResponse
from pta.services.student_service import StudentService

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("", response_model=List[StudentResponse])
async def list_students(
    school_id: Optional[int] = Query(None),
    class_id: Optional[int] = Query(None),
    parent_id: Optional[int] = Query(None),
    payment_status: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Matches name or student number"),
    context: RequestContext = Depends(get_request_context),
    service: StudentService = Depends(get_student_service),
):
    """Students visible to the caller: own children, own classes' students, or the whole school"""
    return await service.get_all(
        context,
        school_id=school_id,
        class_id=class_id,
        parent_id=parent_id,
        payment_status=payment_status,
        search=search,
    )


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    context: RequestContext = Depends(get_request_context),
    service: StudentService = Depends(get_student_service),
):
    return await service.create(context, student_data)


@router.get("/{student_id}", response_model=StudentDetailResponse)
async def get_student(
    student_id: int,
    context: RequestContext = Depends(get_request_context),
    service: StudentService = Depends(get_student_service),
):
    return await service.get_by_id(context, student_id)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    student_data: StudentUpdate,
    context: RequestContext = Depends(get_request_context),
    service: StudentService = Depends(get_student_service),
):
    return await service.update(context, student_id, student_data)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: int,
    context: RequestContext = Depends(get_request_context),
    service: StudentService = Depends(get_student_service),
):
    await service.delete(context, student_id)
