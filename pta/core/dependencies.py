from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pta.core.context import RequestContext
from pta.core.database import get_db
from pta.core.errors import AuthenticationError
from pta.core.security import SecurityConfig, extract_token, verify_token
from pta.services.class_service import ClassService
from pta.services.expense_service import ExpenseService
from pta.services.parent_service import ParentService
from pta.services.payment_service import PaymentService
from pta.services.payment_status import PaymentStatusService
from pta.services.report_service import ReportService
from pta.services.school_service import SchoolService
from pta.services.student_service import StudentService
from pta.services.user_service import UserProfileService


# Service providers
async def get_school_service(db: AsyncSession = Depends(get_db)) -> SchoolService:
    return SchoolService(db)


async def get_class_service(db: AsyncSession = Depends(get_db)) -> ClassService:
    return ClassService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserProfileService:
    return UserProfileService(db)


async def get_parent_service(db: AsyncSession = Depends(get_db)) -> ParentService:
    return ParentService(db)


async def get_student_service(db: AsyncSession = Depends(get_db)) -> StudentService:
    return StudentService(db)


async def get_payment_service(db: AsyncSession = Depends(get_db)) -> PaymentService:
    return PaymentService(db)


async def get_payment_status_service(db: AsyncSession = Depends(get_db)) -> PaymentStatusService:
    return PaymentStatusService(db)


async def get_expense_service(db: AsyncSession = Depends(get_db)) -> ExpenseService:
    return ExpenseService(db)


async def get_report_service(db: AsyncSession = Depends(get_db)) -> ReportService:
    return ReportService(db)


# Caller identity
async def get_current_user_id(request: Request) -> str:
    """Subject of the verified access token"""
    token = extract_token(
        request.headers.get("Authorization"),
        request.cookies.get(SecurityConfig.COOKIE_NAME),
    )
    if not token:
        raise AuthenticationError("Not authenticated - No token found")
    payload = await verify_token(token)
    return str(payload["sub"])


async def get_request_context(
    user_id: str = Depends(get_current_user_id),
    user_service: UserProfileService = Depends(get_user_service),
) -> RequestContext:
    """
    Role and school of the caller, read from its profile.

    Callers without a profile get the unknown role, which every scoped
    operation rejects; they can still set up their own profile.
    """
    return await user_service.resolve_context(user_id)
