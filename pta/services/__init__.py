from .school_service import SchoolService
from .class_service import ClassService
from .user_service import UserProfileService
from .parent_service import ParentService
from .student_service import StudentService
from .payment_service import PaymentService, payment_categories
from .payment_status import PaymentStatusService, mark_parent_paid
from .expense_service import ExpenseService
from .report_service import ReportService

__all__ = [
    "SchoolService",
    "ClassService",
    "UserProfileService",
    "ParentService",
    "StudentService",
    "PaymentService",
    "payment_categories",
    "PaymentStatusService",
    "mark_parent_paid",
    "ExpenseService",
    "ReportService",
]
