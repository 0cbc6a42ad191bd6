# schemas/student/__init__.py
from .requests import StudentCreate, StudentUpdate
from .responses import StudentResponse, StudentDetailResponse
