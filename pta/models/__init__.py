from .base import Base, TenantModel
from .school import School
from .class_ import Class
from .user import UserProfile
from .parent import Parent
from .student import Student
from .payment import Payment
from .expense import Expense

__all__ = [
    'Base',
    'TenantModel',
    'School',
    'Class',
    'UserProfile',
    'Parent',
    'Student',
    'Payment',
    'Expense',
]
