from .schools import router as schools_router
from .classes import router as classes_router
from .users import router as users_router
from .profile import router as profile_router
from .parents import router as parents_router
from .students import router as students_router
from .payments import router as payments_router
from .expenses import router as expenses_router
from .reports import router as reports_router
from .health import router as health_router


__all__ = [
    "schools_router",
    "classes_router",
    "users_router",
    "profile_router",
    "parents_router",
    "students_router",
    "payments_router",
    "expenses_router",
    "reports_router",
    "health_router",
]
