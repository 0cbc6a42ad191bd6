from .error import ErrorResponse
from .summaries import (
    ORMModel,
    SchoolSummary,
    UserSummary,
    ClassSummary,
    ClassWithTeacher,
    ParentSummary,
    ParentContact,
    ParentWithSchool,
    ParentWithStudents,
    StudentSummary,
    StudentWithClass,
    StudentWithParent,
    PaymentSummary,
)
