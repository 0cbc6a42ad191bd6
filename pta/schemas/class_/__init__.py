# schemas/class_/__init__.py
from .requests import ClassCreate, ClassUpdate
from .responses import ClassResponse, ClassDetailResponse
