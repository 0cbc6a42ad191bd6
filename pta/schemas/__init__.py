# pta/schemas/__init__.py

from .enums import UserRole, PaymentMethod, PaymentCategory, PAYMENT_CATEGORIES

from .common import ErrorResponse

from .school import SchoolCreate, SchoolUpdate, SchoolResponse
from .class_ import ClassCreate, ClassUpdate, ClassResponse, ClassDetailResponse
from .user import (
    UserProfileCreate,
    UserProfileUpdate,
    ProfileSetupRequest,
    ProfileUpdateRequest,
    UserProfileResponse,
)
from .parents import ParentCreate, ParentUpdate, ParentResponse, ParentDetailResponse
from .student import StudentCreate, StudentUpdate, StudentResponse, StudentDetailResponse
from .payments import (
    PaymentCreate,
    PaymentStatusUpdate,
    PaymentResponse,
    PaymentDetailResponse,
    PaymentStatusUpdateResponse,
    PaymentCategoryOption,
)
from .expenses import ExpenseCreate, ExpenseUpdate, ExpenseResponse
from .reports import (
    SchoolSummaryResponse,
    TeacherReportClass,
    PaymentBreakdown,
    PaymentAnalyticsResponse,
)
