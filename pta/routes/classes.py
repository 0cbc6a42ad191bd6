from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from pta.core.context import RequestContext
from pta.core.dependencies import get_class_service, get_request_context
from pta.schemas.class_ import ClassCreate, ClassUpdate, ClassResponse, ClassDetailResponse
from pta.schemas.student import StudentResponse
from pta.services.class_service import ClassService

router = APIRouter(prefix="/classes", tags=["Classes"])


@router.get("", response_model=List[ClassResponse])
async def list_classes(
    school_id: Optional[int] = Query(None),
    teacher_id: Optional[str] = Query(None),
    grade_level: Optional[str] = Query(None),
    context: RequestContext = Depends(get_request_context),
    service: ClassService = Depends(get_class_service),
):
    """Classes visible to the caller; teachers only see the classes they teach"""
    return await service.get_all(
        context, school_id=school_id, teacher_id=teacher_id, grade_level=grade_level
    )


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    class_data: ClassCreate,
    context: RequestContext = Depends(get_request_context),
    service: ClassService = Depends(get_class_service),
):
    return await service.create(context, class_data)


@router.get("/{class_id}", response_model=ClassDetailResponse)
async def get_class(
    class_id: int,
    context: RequestContext = Depends(get_request_context),
    service: ClassService = Depends(get_class_service),
):
    return await service.get_by_id(context, class_id)


@router.get("/{class_id}/students", response_model=List[StudentResponse])
async def get_class_roster(
    class_id: int,
    context: RequestContext = Depends(get_request_context),
    service: ClassService = Depends(get_class_service),
):
    return await service.get_roster(context, class_id)


@router.put("/{class_id}", response_model=ClassResponse)
async def update_class(
    class_id: int,
    class_data: ClassUpdate,
    context: RequestContext = Depends(get_request_context),
    service: ClassService = Depends(get_class_service),
):
    return await service.update(context, class_id, class_data)


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_class(
    class_id: int,
    context: RequestContext = Depends(get_request_context),
    service: ClassService = Depends(get_class_service),
):
    """Students of the class stay enrolled without a class"""
    await service.delete(context, class_id)
